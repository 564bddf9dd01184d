"""Static lookup data for scoring, normalization and flavor text."""

# Skill -> tier points used by the technical score.
SKILL_TIERS: dict[str, int] = {
    # S (10): advanced / specialized
    "kubernetes": 10, "machine learning": 10, "deep learning": 10, "rust": 10,
    "system design": 10, "distributed systems": 10, "blockchain": 10, "ai": 10,
    "mlops": 10, "data engineering": 10, "cloud architecture": 10,
    # A (8): senior level
    "typescript": 8, "go": 8, "scala": 8, "python": 8, "java": 8,
    "react": 8, "aws": 8, "gcp": 8, "azure": 8, "docker": 8,
    "postgresql": 8, "mongodb": 8, "graphql": 8, "microservices": 8,
    # B (6): mid level
    "javascript": 6, "node.js": 6, "ruby": 6, "php": 6, "c#": 6,
    "vue": 6, "angular": 6, "mysql": 6, "redis": 6, "elasticsearch": 6,
    "jenkins": 6, "terraform": 6, "kafka": 6,
    # C (4): junior level
    "html": 4, "css": 4, "sql": 4, "git": 4, "linux": 4,
    "rest api": 4, "agile": 4, "scrum": 4, "jira": 4,
    # D (2): basic
    "excel": 2, "word": 2, "powerpoint": 2, "communication": 2,
}

DEFAULT_SKILL_TIER = 3
MAX_SKILL_TIER = 10

TECHNIQUE_NAMES: dict[str, str] = {
    "javascript": "Thunder Script Jutsu",
    "typescript": "Type Guardian Shield",
    "python": "Serpent Code Strike",
    "java": "Ancient Coffee Technique",
    "react": "Component Manifestation",
    "vue": "Progressive Binding Art",
    "angular": "Framework Fortress",
    "node.js": "Server Spirit Summoning",
    "aws": "Cloud Domain Expansion",
    "docker": "Container Dimension",
    "kubernetes": "Orchestration Infinity",
    "machine learning": "Neural Network Enlightenment",
    "ai": "Artificial Intelligence Awakening",
    "rust": "Memory Safe Armor",
    "go": "Goroutine Flash Step",
    "postgresql": "Relational Memory Palace",
    "mongodb": "Document Chaos Control",
    "graphql": "Query Manipulation Art",
    "git": "Version Control Time Travel",
    "linux": "Penguin Spirit Form",
}

TECHNIQUE_PREFIXES = ["Ultimate", "Divine", "Ancient", "Forbidden", "Sacred", "Mystic"]
TECHNIQUE_SUFFIXES = ["Strike", "Art", "Technique", "Jutsu", "Style", "Form"]

# Leadership keywords, highest tier first.
LEADERSHIP_KEYWORDS = [
    "lead", "manager", "director", "head", "chief", "vp", "president",
    "founder", "cto", "ceo", "coo", "principal", "staff", "architect",
]
EXECUTIVE_KEYWORDS = ["ceo", "cto", "coo", "chief", "president", "founder"]
DIRECTOR_KEYWORDS = ["director", "vp", "head"]
LEAD_KEYWORDS = ["lead", "manager", "principal", "staff"]

# Narrower list used when picking leadership roles out of LinkedIn experience.
ROLE_TITLE_KEYWORDS = [
    "lead", "manager", "director", "head", "chief", "vp", "president",
    "founder", "cto", "ceo", "coo",
]

ENCYCLOPEDIA_LEADERSHIP_KEYWORDS = [
    "founder", "ceo", "president", "chairman", "director", "chief",
    "inventor", "creator", "pioneer",
]

PRESTIGE_COMPANIES = [
    "google", "meta", "facebook", "amazon", "apple", "microsoft", "netflix",
    "tesla", "openai", "anthropic", "stripe", "airbnb", "uber", "coinbase",
    "databricks",
]

NATIONALITIES = [
    "American", "British", "Canadian", "Indian", "Chinese", "French",
    "German", "Japanese", "South African", "Australian", "Israeli", "Korean",
    "Brazilian", "Russian", "Italian", "Spanish", "Dutch", "Swedish",
    "Norwegian", "Swiss", "Irish", "Scottish", "New Zealand", "Taiwanese",
    "Singaporean", "Malaysian", "Indonesian",
]

ABILITY_TEMPLATES: dict[str, str] = {
    "The Strategist": "Strategic {skill} Mastery - Can see through any technical challenge",
    "The Executor": "Rapid {skill} Deployment - Executes with lightning speed",
    "The Visionary": "{skill} Innovation - Creates solutions others can't imagine",
    "The Warrior": "Balanced {skill} Combat - Adapts to any battle situation",
    "The Prodigy": "Innate {skill} Genius - Natural talent beyond years",
    "The Veteran": "Ancient {skill} Wisdom - Experience that never fails",
    "The Shadow": "Hidden {skill} Power - True strength revealed in critical moments",
    "The Commander": "{skill} Leadership Aura - Inspires and leads armies of developers",
}

# (minimum years, label), checked top-down.
EXPERIENCE_LABELS = [
    (20, "Legendary Veteran (20+ years of battle)"),
    (15, "Master Warrior (15+ years of battle)"),
    (10, "Elite Fighter (10+ years of battle)"),
    (7, "Seasoned Warrior (7+ years of battle)"),
    (5, "Experienced Fighter (5+ years of battle)"),
    (3, "Rising Warrior (3+ years of battle)"),
    (1, "Young Fighter (1+ years of battle)"),
]
NEWCOMER_LABEL = "Newcomer (Beginning their journey)"

# (minimum years, score), checked top-down.
EXPERIENCE_SCORES = [
    (20, 100), (15, 90), (10, 80), (7, 70), (5, 60), (3, 45), (2, 35), (1, 25),
]
EXPERIENCE_FLOOR_SCORE = 15
