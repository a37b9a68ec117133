"""MCP resource definitions for the family directory server."""

from .directory import FamilyDirectory
from .hierarchy import area_label


def register_resources(mcp, directory: FamilyDirectory):
    """Register all MCP resources with the server."""

    @mcp.resource("family://members")
    async def resource_members() -> str:
        """Get list of all members."""
        members = await directory.load_members()
        lines = []
        for m in members:
            city = m.city or "N/A"
            lines.append(f"{m.id}: {m.name} ({city})")
        return "\n".join(lines)

    @mcp.resource("family://member/{id}")
    async def resource_member(id: str) -> str:
        """Get member record by ID."""
        member = await directory.get_member(id)
        if member:
            return str(member.to_dict())
        return f"Member {id} not found"

    @mcp.resource("family://relations")
    async def resource_relations() -> str:
        """Get list of all relation links."""
        await directory.refresh()
        names = {m.id: m.name for m in directory.members}
        lines = []
        for r in directory.relations:
            first = names.get(r.member1_id, r.member1_id)
            second = names.get(r.member2_id, r.member2_id)
            lines.append(f"{first} -> {second}: {r.relation_type}")
        return "\n".join(lines)

    @mcp.resource("family://areas")
    async def resource_areas() -> str:
        """Get list of areas with member counts."""
        members = await directory.load_members()
        area_counts: dict[str, int] = {}
        for m in members:
            label = area_label(m)
            area_counts[label] = area_counts.get(label, 0) + 1
        counts = list(area_counts.items())
        counts.sort(key=lambda x: (-x[1], x[0]))  # Sort by count desc, then name
        return "\n".join(f"{area}: {count}" for area, count in counts)