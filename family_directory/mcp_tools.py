"""MCP tool definitions for the family directory server."""

from contextlib import contextmanager

from .constants import ALL, HAS_CHILDREN_CHOICES
from .coordinates import check_point, extract_coordinates, map_markers, members_near
from .directory import FamilyDirectory, status_response
from .errors import FamilyDirectoryError, ValidationError
from .filters import (
    FilterCriteria,
    apply_filters,
    fuzzy_search_members,
    unique_districts,
    unique_states,
)
from .helpers import to_record_keys
from .hierarchy import area_label, forest_to_dict
from .telemetry import get_tracer
from .tree import render_tree


@contextmanager
def _tool_span(name: str):
    with get_tracer().start_as_current_span(f"tool.{name}") as span:
        yield span


def _criteria(
    search_term: str = "",
    state: str = ALL,
    district: str = ALL,
    has_children: str = ALL,
) -> FilterCriteria:
    if has_children not in HAS_CHILDREN_CHOICES:
        raise ValidationError(f"has_children must be one of {', '.join(HAS_CHILDREN_CHOICES)}")
    return FilterCriteria(
        search_term=search_term or "",
        state=state or ALL,
        district=district or ALL,
        has_children=has_children or ALL,
    )


def register_tools(mcp, directory: FamilyDirectory):
    """Register all MCP tools with the server, bound to one directory instance."""

    # ============== MEMBER TOOLS ==============

    @mcp.tool()
    async def list_members() -> list[dict] | dict:
        """
        List every family member with summary info.

        Returns:
            List of members (id, name, spouse name, city)
        """
        with _tool_span("list_members"):
            try:
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return [m.to_summary() for m in members]

    @mcp.tool()
    async def get_member(member_id: str) -> dict | None:
        """
        Get the full record for one member.

        Args:
            member_id: The member's store ID

        Returns:
            Member record, or None if not found
        """
        with _tool_span("get_member"):
            try:
                member = await directory.get_member(member_id)
            except FamilyDirectoryError as e:
                return status_response(e)
            return member.to_dict() if member else None

    @mcp.tool()
    async def add_member(
        name: str,
        spouse_name: str = "",
        contact_number: str = "",
        state: str = "",
        district: str = "",
        city: str = "",
        latitude: str = "",
        longitude: str = "",
        google_map_url: str = "",
        date_of_birth: str = "",
        date_of_marriage: str = "",
        is_alive: bool = True,
        date_of_death: str = "",
        children: list[str] | None = None,
    ) -> dict:
        """
        Add a family member.

        A Google Maps URL containing coordinates fills in latitude/longitude.
        Dates are ISO dates (YYYY-MM-DD). date_of_death is ignored while
        is_alive is true.

        Args:
            name: Member's name (required)
            children: IDs of this member's children, in display order

        Returns:
            The created member record, or a status message on failure
        """
        with _tool_span("add_member"):
            data = to_record_keys(
                {
                    "name": name,
                    "spouse_name": spouse_name,
                    "contact_number": contact_number,
                    "state": state,
                    "district": district,
                    "city": city,
                    "date_of_birth": date_of_birth,
                    "date_of_marriage": date_of_marriage,
                    "is_alive": is_alive,
                    "date_of_death": date_of_death,
                    "children": children or [],
                }
            )
            # Only pass location fields that were given, so URL/coordinate sync sees real edits
            location = {"latitude": latitude, "longitude": longitude, "google_map_url": google_map_url}
            data.update(to_record_keys({k: v for k, v in location.items() if v}))
            try:
                member = await directory.add_member(data)
            except FamilyDirectoryError as e:
                return status_response(e)
            return {"status": "ok", "message": directory.status, "member": member.to_dict()}

    @mcp.tool()
    async def update_member(member_id: str, changes: dict) -> dict:
        """
        Update fields of an existing member.

        Editing google_map_url re-derives latitude/longitude; editing latitude
        or longitude regenerates the directions URL. A URL edit wins when both
        are given.

        Args:
            member_id: The member's store ID
            changes: Fields to change, e.g. {"city": "Madurai", "latitude": "9.93"}

        Returns:
            The updated member record, or a status message on failure
        """
        with _tool_span("update_member"):
            try:
                member = await directory.update_member(member_id, to_record_keys(changes))
            except FamilyDirectoryError as e:
                return status_response(e)
            return {"status": "ok", "message": directory.status, "member": member.to_dict()}

    @mcp.tool()
    async def delete_member(member_id: str) -> dict:
        """
        Delete a family member. This cannot be undone.

        Relation edges and children lists that mention the member are left as
        they are and ignored by the tree views.
        """
        with _tool_span("delete_member"):
            try:
                await directory.delete_member(member_id)
            except FamilyDirectoryError as e:
                return status_response(e)
            return {"status": "ok", "message": directory.status}

    # ============== RELATION TOOLS ==============

    @mcp.tool()
    async def link_members(member1_id: str, member2_id: str, relation_type: str) -> dict:
        """
        Link two members with a relation, replacing any existing link.

        The relation reads "member1 is <relation_type> of member2" for
        Father/Mother, and "member2 is member1's Son/Daughter" for Son/Daughter;
        all four make member1 the parent in the family tree. Son/Daughter links
        also add member2 to member1's children list; Father/Mother links do not.
        Brother/Sister links are one-directional.

        Args:
            member1_id: ID of the first member
            member2_id: ID of the second member
            relation_type: Father, Mother, Son, Daughter, Brother, Sister, Uncle, Grandma or Grandpa

        Returns:
            The stored relation, or a status message on failure
        """
        with _tool_span("link_members"):
            try:
                relation = await directory.link_members(member1_id, member2_id, relation_type)
            except FamilyDirectoryError as e:
                return status_response(e)
            return {"status": "ok", "message": directory.status, "relation": relation.to_dict()}

    @mcp.tool()
    async def unlink_members(member1_id: str, member2_id: str) -> dict:
        """
        Remove the relation stored from member1 to member2.

        Returns:
            Number of relation edges removed
        """
        with _tool_span("unlink_members"):
            try:
                removed = await directory.unlink_members(member1_id, member2_id)
            except FamilyDirectoryError as e:
                return status_response(e)
            return {"status": "ok", "removed": removed}

    # ============== TREE TOOLS ==============

    @mcp.tool()
    async def get_family_tree(nested: bool = True) -> dict:
        """
        Build the family tree from relation links.

        Members without parents are roots at level 0; each child is one level
        below its parent, siblings share a level.

        Args:
            nested: Return nested root trees (True) or a flat node map (False)

        Returns:
            {"roots": [...]} nested view, or {"nodes": {id: node}} flat view
        """
        with _tool_span("get_family_tree"):
            try:
                tree = await directory.family_tree()
            except FamilyDirectoryError as e:
                return status_response(e)
            if nested:
                return {"roots": render_tree(tree)}
            return {"nodes": {member_id: node.to_dict() for member_id, node in tree.items()}}

    @mcp.tool()
    async def get_hierarchy(
        search_term: str = "",
        state: str = ALL,
        district: str = ALL,
        has_children: str = ALL,
    ) -> dict:
        """
        Build the parent/children hierarchy from each member's children list.

        Filters are applied first, so only matching members are placed.

        Returns:
            {"roots": [...]} with nested children_nodes
        """
        with _tool_span("get_hierarchy"):
            try:
                criteria = _criteria(search_term, state, district, has_children)
                forest = await directory.hierarchy(criteria)
            except FamilyDirectoryError as e:
                return status_response(e)
            return forest_to_dict(forest)

    @mcp.tool()
    async def get_area_groups(
        search_term: str = "",
        state: str = ALL,
        district: str = ALL,
        has_children: str = ALL,
    ) -> dict:
        """
        Group members by area ("City, District, State") with a hierarchy per area.

        Members with no location are grouped under "No Area Set".

        Returns:
            Dict of area label -> {"roots": [...]}
        """
        with _tool_span("get_area_groups"):
            try:
                criteria = _criteria(search_term, state, district, has_children)
                groups = await directory.area_groups(criteria)
            except FamilyDirectoryError as e:
                return status_response(e)
            return {area: forest_to_dict(forest) for area, forest in groups.items()}

    # ============== SEARCH TOOLS ==============

    @mcp.tool()
    async def filter_members(
        search_term: str = "",
        state: str = ALL,
        district: str = ALL,
        has_children: str = ALL,
    ) -> list[dict] | dict:
        """
        Filter members like the address book does.

        Args:
            search_term: Matches name, spouse name or city (any case) or phone number
            state: Exact state, or "all"
            district: Exact district, or "all"
            has_children: "all", "yes" or "no"

        Returns:
            Matching members in stored order
        """
        with _tool_span("filter_members"):
            try:
                criteria = _criteria(search_term, state, district, has_children)
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return [m.to_dict() for m in apply_filters(members, criteria)]

    @mcp.tool()
    async def search_members(name: str, threshold: int = 70, max_results: int = 20) -> list[dict] | dict:
        """
        Typo-tolerant name search (fuzzy and sounds-alike matching).

        Args:
            name: Name to look for
            threshold: Minimum fuzzy score 0-100 (default 70)
            max_results: Maximum results (default 20)

        Returns:
            Members with match_score, best first
        """
        with _tool_span("search_members"):
            try:
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return fuzzy_search_members(members, name, threshold, max_results)

    @mcp.tool()
    async def get_filter_options() -> dict:
        """
        Values available for the state, district and has_children filters.
        """
        with _tool_span("get_filter_options"):
            try:
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return {
                "states": unique_states(members),
                "districts": unique_districts(members),
                "has_children": list(HAS_CHILDREN_CHOICES),
                "areas": list(dict.fromkeys(area_label(m) for m in members)),
            }

    # ============== MAP TOOLS ==============

    @mcp.tool()
    def extract_map_coordinates(url: str) -> dict | None:
        """
        Read latitude/longitude from a Google Maps link.

        Understands "@lat,lng" links, embedded "!3d..!4d.." pins and
        q/query/destination/daddr parameters.

        Returns:
            {"lat": "...", "lng": "..."} as text, or None
        """
        with _tool_span("extract_map_coordinates"):
            return extract_coordinates(url)

    @mcp.tool()
    async def get_map_markers() -> list[dict] | dict:
        """
        Map markers for every member with a known location.

        Returns:
            List of {id, name, lat, lng, directions_url}
        """
        with _tool_span("get_map_markers"):
            try:
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return map_markers(members)

    @mcp.tool()
    async def search_nearby(
        latitude: float,
        longitude: float,
        radius_km: float = 25.0,
        max_results: int = 50,
    ) -> list[dict] | dict:
        """
        Find members living within radius_km of a point, nearest first.

        Members whose stored coordinates are out of range are left out.

        Returns:
            Members with distance_km, or a warning if the point is out of range
        """
        with _tool_span("search_nearby"):
            try:
                check_point(latitude, longitude)
                members = await directory.load_members()
            except FamilyDirectoryError as e:
                return status_response(e)
            return members_near(members, latitude, longitude, radius_km, max_results)
