"""Data models for family directory records and derived trees."""

from dataclasses import dataclass, field

from .errors import ValidationError
from .helpers import build_directions_url, clean_text


@dataclass
class Member:
    id: str
    name: str
    spouse_name: str = ""
    contact_number: str = ""
    state: str = ""
    district: str = ""
    city: str = ""
    latitude: str = ""  # decimal degrees as text
    longitude: str = ""
    google_map_url: str = ""
    date_of_birth: str = ""  # ISO date
    date_of_marriage: str = ""
    is_alive: bool = True
    date_of_death: str = ""  # only kept when is_alive is False
    children: list[str] = field(default_factory=list)  # member IDs, display order
    created_at: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "Member":
        """Build a Member from a stored record, applying field defaults.

        Raises:
            ValidationError: If the record has no id or a blank name.
        """
        member_id = clean_text(record.get("id"))
        if not member_id:
            raise ValidationError("Member record has no id")
        name = clean_text(record.get("name"))
        if not name:
            raise ValidationError(f"Member {member_id} has no name")

        raw_children = record.get("children")
        children = []
        if isinstance(raw_children, list):
            children = [str(c) for c in raw_children if c is not None and str(c)]

        return cls(
            id=member_id,
            name=name,
            spouse_name=clean_text(record.get("spouseName")),
            contact_number=clean_text(record.get("contactNumber")),
            state=clean_text(record.get("state")),
            district=clean_text(record.get("district")),
            city=clean_text(record.get("city")),
            latitude=clean_text(record.get("latitude")),
            longitude=clean_text(record.get("longitude")),
            google_map_url=clean_text(record.get("googleMapUrl")),
            date_of_birth=clean_text(record.get("dateOfBirth")),
            date_of_marriage=clean_text(record.get("dateOfMarriage")),
            is_alive=record.get("isAlive") is not False,
            date_of_death=clean_text(record.get("dateOfDeath")),
            children=children,
            created_at=record.get("createdAt"),
        )

    def to_record(self) -> dict:
        """Payload written to the store (without id).

        The map URL is regenerated from latitude/longitude, and the date of
        death is dropped for living members.
        """
        return {
            "name": self.name,
            "spouseName": self.spouse_name or "",
            "contactNumber": self.contact_number or "",
            "state": self.state or "",
            "district": self.district or "",
            "city": self.city or "",
            "latitude": self.latitude or "",
            "longitude": self.longitude or "",
            "googleMapUrl": build_directions_url(self.latitude, self.longitude),
            "dateOfBirth": self.date_of_birth or "",
            "dateOfMarriage": self.date_of_marriage or "",
            "isAlive": self.is_alive is not False,
            "dateOfDeath": "" if self.is_alive else (self.date_of_death or ""),
            "children": list(self.children),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "spouse_name": self.spouse_name,
            "contact_number": self.contact_number,
            "state": self.state,
            "district": self.district,
            "city": self.city,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "google_map_url": self.google_map_url,
            "date_of_birth": self.date_of_birth,
            "date_of_marriage": self.date_of_marriage,
            "is_alive": self.is_alive,
            "date_of_death": self.date_of_death,
            "children": self.children,
            "created_at": self.created_at,
        }

    def to_summary(self) -> dict:
        """Short summary for list views."""
        return {
            "id": self.id,
            "name": self.name,
            "spouse_name": self.spouse_name,
            "city": self.city,
        }


@dataclass
class Relation:
    id: str
    member1_id: str
    member2_id: str
    relation_type: str  # Father, Mother, Son, Daughter, Brother, Sister, ...

    @classmethod
    def from_record(cls, record: dict) -> "Relation":
        return cls(
            id=clean_text(record.get("id")),
            member1_id=clean_text(record.get("member1Id")),
            member2_id=clean_text(record.get("member2Id")),
            relation_type=clean_text(record.get("relationType")),
        )

    def to_record(self) -> dict:
        return {
            "member1Id": self.member1_id,
            "member2Id": self.member2_id,
            "relationType": self.relation_type,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member1_id": self.member1_id,
            "member2_id": self.member2_id,
            "relation_type": self.relation_type,
        }


@dataclass
class TreeLink:
    id: str
    relation: str

    def to_dict(self) -> dict:
        return {"id": self.id, "relation": self.relation}


@dataclass
class TreeNode:
    """A member's position in the relation-edge family tree."""

    member_id: str
    name: str
    spouse_name: str = ""
    children: list[TreeLink] = field(default_factory=list)
    parents: list[TreeLink] = field(default_factory=list)
    siblings: list[TreeLink] = field(default_factory=list)
    level: int = 0

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "name": self.name,
            "spouse_name": self.spouse_name,
            "children": [c.to_dict() for c in self.children],
            "parents": [p.to_dict() for p in self.parents],
            "siblings": [s.to_dict() for s in self.siblings],
            "level": self.level,
        }


@dataclass
class HierarchyNode:
    """A member decorated with child nodes resolved from its children list."""

    member: Member
    children_nodes: list["HierarchyNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.member.id

    def to_dict(self) -> dict:
        # Children already on the current path are dropped so cyclic data still serializes
        top: list[dict] = []
        stack: list[tuple[HierarchyNode, frozenset[str], list[dict]]] = [(self, frozenset(), top)]
        while stack:
            node, path, target = stack.pop()
            result = node.member.to_summary()
            result["children_nodes"] = []
            target.append(result)

            inner = path | {node.member.id}
            for child in reversed(node.children_nodes):
                if child.member.id not in inner:
                    stack.append((child, inner, result["children_nodes"]))
        return top[0]
