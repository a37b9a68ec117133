"""Constants for family relations, filters and map links."""

# Store collections
MEMBERS_COLLECTION = "members"
RELATIONS_COLLECTION = "relations"

# Relation types accepted when linking two members
RELATION_TYPES = [
    "Father",
    "Mother",
    "Son",
    "Daughter",
    "Brother",
    "Sister",
    "Uncle",
    "Grandma",
    "Grandpa",
]

# member1 is the parent of member2 for any of these
PARENT_RELATIONS = frozenset({"Father", "Mother", "Son", "Daughter"})

# member1 lists member2 as a sibling (one direction only)
SIBLING_RELATIONS = frozenset({"Brother", "Sister"})

# Linking with these also appends member2 to member1's embedded children list
CHILD_LIST_RELATIONS = frozenset({"Son", "Daughter"})

# Display labels for relation types
RELATION_LABELS = {
    "Father": "👨 Father",
    "Mother": "👩 Mother",
    "Son": "👦 Son",
    "Daughter": "👧 Daughter",
    "Brother": "👬 Brother",
    "Sister": "👭 Sister",
    "Uncle": "🧔 Uncle",
    "Grandma": "👵 Grandma",
    "Grandpa": "👴 Grandpa",
}

# Filter sentinel meaning "no filter"
ALL = "all"
HAS_CHILDREN_CHOICES = (ALL, "yes", "no")

# Area label for members without city, district or state
NO_AREA_LABEL = "No Area Set"

# Canonical direction link, filled with lat/lng
DIRECTIONS_URL_TEMPLATE = "https://www.google.com/maps/dir/?api=1&destination={lat},{lng}"

# Map URL coordinate patterns, tried in order
COORDINATE_PATTERNS = [
    r"@(-?\d+\.\d+),(-?\d+\.\d+)",  # .../@12.97,80.27,15z
    r"!3d(-?\d+\.\d+)!4d(-?\d+\.\d+)",  # embedded pin
    r"[?&](?:q|query|destination|daddr)=(-?\d+\.\d+),(-?\d+\.\d+)",
]

# Tool argument names -> stored record keys
RECORD_KEYS = {
    "name": "name",
    "spouse_name": "spouseName",
    "contact_number": "contactNumber",
    "state": "state",
    "district": "district",
    "city": "city",
    "latitude": "latitude",
    "longitude": "longitude",
    "google_map_url": "googleMapUrl",
    "date_of_birth": "dateOfBirth",
    "date_of_marriage": "dateOfMarriage",
    "is_alive": "isAlive",
    "date_of_death": "dateOfDeath",
    "children": "children",
}
