"""Reference data — keyword lists and name heuristics shared by the extractors.

This is the encoded review knowledge that keeps extraction deterministic.
Everything is matched textually; nothing here requires a parser.
"""

# ──────────────────────────────────────────────────────────────────────
# LANGUAGE KEYWORDS
# ──────────────────────────────────────────────────────────────────────

# Blocks that count towards nesting depth (conditionals and loops)
NESTING_KEYWORDS = {"if", "else", "for", "foreach", "while", "do", "switch"}

# Blocks that open control flow but are not methods
CONTROL_KEYWORDS = NESTING_KEYWORDS | {"try", "catch", "finally", "synchronized", "using", "lock", "when"}

# Words that can precede "(" without being a method name
NON_METHOD_NAMES = CONTROL_KEYWORDS | {
    "return", "new", "throw", "super", "this", "assert", "case", "sizeof", "typeof",
}

# Tokens that can never appear in a method declaration prefix
NON_DECLARATION_TOKENS = {"new", "return", "throw", "else", "case", "await", "yield"}

# Type declarations
TYPE_KEYWORDS = {"class", "interface", "enum", "record", "object", "struct", "trait"}

# Files whose comments start with '#'
HASH_COMMENT_EXTENSIONS = {".py", ".rb", ".sh", ".bash", ".yaml", ".yml", ".toml", ".properties", ".pl"}

# ──────────────────────────────────────────────────────────────────────
# NAMING
# ──────────────────────────────────────────────────────────────────────

# Method names that say nothing about what the method does
VAGUE_METHOD_NAMES = {
    "get", "set", "do", "handle", "process", "manage", "data", "info",
    "obj", "temp", "tmp", "var", "stuff", "thing",
}

# Single-letter names accepted by convention (loop counters, exceptions, coordinates)
ACCEPTED_SHORT_NAMES = {"i", "j", "k", "n", "e", "x", "y", "_"}

# Types that introduce a declaration when followed by an identifier
PRIMITIVE_TYPES = {"int", "long", "short", "byte", "char", "float", "double", "boolean", "var", "val", "let", "const"}

# ──────────────────────────────────────────────────────────────────────
# SECURITY
# ──────────────────────────────────────────────────────────────────────

# Fragments of variable names that suggest a credential
SENSITIVE_NAME_TERMS = ["password", "passwd", "secret", "apikey", "api_key", "token", "key"]

# Names containing a sensitive term that are not credentials
NON_SECRET_NAMES = {"keyboard", "monkey", "turkey", "hockey", "donkey", "keyword", "keywords", "keyset"}

# Injection annotations, matched without the leading '@'
INJECTION_ANNOTATIONS = ["Autowired", "Inject", "Resource"]

WEAK_ALGORITHMS = ["MD5", "SHA1", "SHA-1", "DES", "RC4", "MD2"]

SQL_VERBS = ["SELECT", "INSERT", "UPDATE", "DELETE"]

# ──────────────────────────────────────────────────────────────────────
# PERFORMANCE
# ──────────────────────────────────────────────────────────────────────

BULK_READ_CALLS = ["findAll", "getAll", "listAll", "fetchAll"]

COLLECTION_RELATIONS = ["OneToMany", "ManyToMany"]

# Types whose '+=' inside a loop copies the whole value every iteration
IMMUTABLE_STRING_TYPES = {"String", "string", "str"}
