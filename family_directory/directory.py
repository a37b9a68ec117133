"""Async orchestration of store calls for the family directory.

``FamilyDirectory`` owns the in-memory snapshot of members and relations and
is the only place that talks to the injected ``DocumentStore``. Store
failures abort the operation and leave the snapshot untouched; invalid user
input is rejected before any store call.
"""

from __future__ import annotations

import logging
from typing import Any

from .constants import (
    CHILD_LIST_RELATIONS,
    MEMBERS_COLLECTION,
    RELATION_TYPES,
    RELATIONS_COLLECTION,
)
from .coordinates import apply_location_edit
from .errors import FamilyDirectoryError, StoreError, ValidationError
from .filters import FilterCriteria, apply_filters
from .hierarchy import build_forest, group_by_area
from .models import Member, Relation, TreeNode
from .store import DocumentStore
from .telemetry import get_tracer
from .tree import build_family_tree

logger = logging.getLogger(__name__)


class FamilyDirectory:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.members: list[Member] = []
        self.relations: list[Relation] = []
        self.status = ""

    async def _store_call(self, operation: str, collection: str, *args: Any) -> Any:
        """Run one store operation inside a span, normalizing failures to StoreError."""
        tracer = get_tracer()
        with tracer.start_as_current_span(f"store.{operation}") as span:
            span.set_attribute("store.collection", collection)
            method = getattr(self.store, operation)
            try:
                return await method(collection, *args)
            except StoreError:
                raise
            except Exception as e:
                raise StoreError(f"{operation} on {collection} failed: {e}") from e

    def _find_member(self, member_id: str) -> Member | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    # ============== LOADING ==============

    async def load_members(self) -> list[Member]:
        """Fetch all members, skipping records that fail validation."""
        try:
            records = await self._store_call("list_all", MEMBERS_COLLECTION)
        except StoreError as e:
            self.status = "Error fetching family members."
            logger.warning(f"Failed to load members: {e}")
            raise

        members = []
        for record in records:
            try:
                members.append(Member.from_record(record))
            except ValidationError as e:
                logger.debug(f"Skipping member record: {e}")

        self.members = members
        self.status = "Family members loaded successfully."
        logger.info(f"Loaded {len(members)} members")
        return members

    async def load_relations(self) -> list[Relation]:
        try:
            records = await self._store_call("list_all", RELATIONS_COLLECTION)
        except StoreError as e:
            self.status = "Error fetching relations."
            logger.warning(f"Failed to load relations: {e}")
            raise

        self.relations = [Relation.from_record(r) for r in records]
        logger.info(f"Loaded {len(self.relations)} relations")
        return self.relations

    async def refresh(self) -> None:
        """Reload members and relations from the store."""
        await self.load_members()
        await self.load_relations()

    async def get_member(self, member_id: str) -> Member | None:
        record = await self._store_call("get", MEMBERS_COLLECTION, member_id)
        if record is None:
            return None
        try:
            return Member.from_record({**record, "id": member_id})
        except ValidationError as e:
            logger.debug(f"Member {member_id} is not valid: {e}")
            return None

    # ============== MEMBER CRUD ==============

    async def add_member(self, data: dict) -> Member:
        """Create a member from a form record (camelCase keys).

        A map URL with coordinates fills in latitude and longitude.

        Raises:
            ValidationError: If the name is blank.
            StoreError: If the store rejects the write.
        """
        prepared = apply_location_edit({}, data)
        member = Member.from_record({**prepared, "id": "new"})
        payload = member.to_record()

        try:
            member_id = await self._store_call("create", MEMBERS_COLLECTION, payload)
        except StoreError as e:
            self.status = "Failed to add family member."
            logger.warning(f"Failed to add member {member.name!r}: {e}")
            raise

        created = Member.from_record({**payload, "id": member_id})
        self.members.append(created)
        self.status = "Family member added successfully."
        logger.info(f"Added member {member_id} ({created.name})")
        return created

    async def update_member(self, member_id: str, changes: dict) -> Member:
        """Apply a form edit to an existing member and save the full payload.

        Raises:
            ValidationError: If the member is unknown or the edit blanks the name.
            StoreError: If the store rejects the write.
        """
        current = self._find_member(member_id) or await self.get_member(member_id)
        if current is None:
            raise ValidationError(f"Member {member_id} not found")

        merged = apply_location_edit(current.to_record(), changes)
        member = Member.from_record({**merged, "id": member_id})
        payload = member.to_record()

        try:
            await self._store_call("update", MEMBERS_COLLECTION, member_id, payload)
        except StoreError as e:
            self.status = "Failed to update family member."
            logger.warning(f"Failed to update member {member_id}: {e}")
            raise

        updated = Member.from_record({**payload, "id": member_id, "createdAt": current.created_at})
        self.members = [updated if m.id == member_id else m for m in self.members]
        self.status = "Family member updated successfully."
        logger.info(f"Updated member {member_id}")
        return updated

    async def delete_member(self, member_id: str) -> None:
        if not member_id:
            raise ValidationError("Member id is required")

        try:
            await self._store_call("delete", MEMBERS_COLLECTION, member_id)
        except StoreError as e:
            self.status = "Failed to delete family member."
            logger.warning(f"Failed to delete member {member_id}: {e}")
            raise

        self.members = [m for m in self.members if m.id != member_id]
        self.status = "Family member removed."
        logger.info(f"Deleted member {member_id}")

    # ============== RELATIONS ==============

    async def find_relations(self, member1_id: str, member2_id: str) -> list[Relation]:
        """Relation edges stored for the ordered pair (member1, member2)."""
        records = await self._store_call("query_where", RELATIONS_COLLECTION, "member1Id", member1_id)
        return [
            Relation.from_record(r) for r in records if r.get("member2Id") == member2_id
        ]

    async def link_members(self, member1_id: str, member2_id: str, relation_type: str) -> Relation:
        """Link two members, replacing any edge already stored for the ordered pair.

        The replace is delete-then-insert and not atomic: a failure after the
        delete leaves no edge, and linking again restores it. Son/Daughter
        links also append member2 to member1's children list. The cached
        relation list follows whatever store writes succeeded, even when a
        later step fails.

        Raises:
            ValidationError: For a self-link, a missing member id or an unknown type.
            StoreError: If any store call fails.
        """
        if not member1_id or not member2_id:
            raise ValidationError("Both members are required")
        if member1_id == member2_id:
            raise ValidationError("You cannot link a member to itself.")
        if relation_type not in RELATION_TYPES:
            raise ValidationError(f"Unknown relation type: {relation_type}")

        relation = Relation(
            id="",
            member1_id=member1_id,
            member2_id=member2_id,
            relation_type=relation_type,
        )

        removed: set[str] = set()
        created = False
        try:
            for old in await self.find_relations(member1_id, member2_id):
                await self._store_call("delete", RELATIONS_COLLECTION, old.id)
                removed.add(old.id)
                logger.info(f"Unlinked existing relation {old.id}")

            relation.id = await self._store_call("create", RELATIONS_COLLECTION, relation.to_record())
            created = True

            if relation_type in CHILD_LIST_RELATIONS:
                await self._append_child(member1_id, member2_id)
        except StoreError as e:
            self.status = "Error linking family members."
            logger.warning(f"Failed to link {member1_id} -> {member2_id}: {e}")
            raise
        finally:
            self.relations = [r for r in self.relations if r.id not in removed]
            if created:
                self.relations.append(relation)

        self.status = "Family members linked successfully."
        logger.info(f"Linked {member1_id} -> {member2_id} as {relation_type}")
        return relation

    async def _append_child(self, parent_id: str, child_id: str) -> None:
        record = await self._store_call("get", MEMBERS_COLLECTION, parent_id)
        if record is None:
            logger.debug(f"Parent {parent_id} not found; children list not updated")
            return

        children = list(record.get("children") or [])
        if child_id in children:
            return
        children.append(child_id)
        await self._store_call("update", MEMBERS_COLLECTION, parent_id, {"children": children})

        cached = self._find_member(parent_id)
        if cached is not None and child_id not in cached.children:
            cached.children.append(child_id)

    async def unlink_members(self, member1_id: str, member2_id: str) -> int:
        """Delete every edge stored for the ordered pair. Returns the number removed."""
        try:
            existing = await self.find_relations(member1_id, member2_id)
            for old in existing:
                await self._store_call("delete", RELATIONS_COLLECTION, old.id)
        except StoreError as e:
            self.status = "Error unlinking family members."
            logger.warning(f"Failed to unlink {member1_id} -> {member2_id}: {e}")
            raise

        removed = {old.id for old in existing}
        self.relations = [r for r in self.relations if r.id not in removed]
        logger.info(f"Removed {len(removed)} relation(s) {member1_id} -> {member2_id}")
        return len(removed)

    # ============== VIEWS ==============

    async def family_tree(self) -> dict[str, TreeNode]:
        """Reload and build the relation-edge tree."""
        await self.refresh()
        return build_family_tree(self.members, self.relations)

    async def hierarchy(self, criteria: FilterCriteria | None = None) -> dict:
        """Reload and build the embedded-children forest over the filtered members."""
        members = await self.filtered_members(criteria)
        return build_forest(members)

    async def area_groups(self, criteria: FilterCriteria | None = None) -> dict[str, dict]:
        members = await self.filtered_members(criteria)
        return group_by_area(members)

    async def filtered_members(self, criteria: FilterCriteria | None = None) -> list[Member]:
        members = await self.load_members()
        if criteria is None:
            return members
        return apply_filters(members, criteria)


def status_response(error: FamilyDirectoryError) -> dict:
    """Tool-facing result for a failed operation."""
    level = "warning" if isinstance(error, ValidationError) else "error"
    return {"status": level, "message": str(error)}
