"""Constants used throughout JuicyURLs.

This module contains enums, limits, and the built-in suspicious pattern
tables so every component agrees on the same values.
"""

from enum import Enum


class Category(str, Enum):
    """Suspicious-signal categories, listed in match precedence order."""
    KEYWORDS = "keywords"
    EXTENSIONS = "extensions"
    PATHS = "paths"
    HIDDEN = "hidden"


class PipelineState(Enum):
    """Classification pipeline lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


class RunOutcome(Enum):
    """How a run ended."""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class OutputFormat(str, Enum):
    """Result output formats."""
    TEXT = "text"
    JSON = "json"


CATEGORY_REASONS = {
    Category.KEYWORDS: "Contains suspicious keyword",
    Category.EXTENSIONS: "Suspicious file extension",
    Category.PATHS: "Suspicious path pattern",
    Category.HIDDEN: "Hidden file or directory",
}

# Patterns carrying this prefix are compiled as regular expressions
REGEX_PATTERN_PREFIX = "re:"

COMMENT_PREFIXES = ("#", "//")
VALID_URL_PREFIXES = ("http://", "https://", "ftp://")


# Limits and tuning
MAX_URL_LENGTH = 2048
MAX_FILE_SIZE = 500 * 1024 * 1024           # 500 MiB
MAX_LINE_LENGTH = 1024 * 1024               # 1 MiB
LARGE_INPUT_THRESHOLD = 50 * 1024 * 1024    # switch to chunked mode above this
CHUNK_SIZE = 50_000
MAX_WORKERS = 500
SMALL_INPUT_LINES = 1000                    # below this, scale workers to input size
INPUT_QUEUE_FACTOR = 4
RESULTS_QUEUE_FACTOR = 2
STATS_FLUSH_INTERVAL = 5.0                  # seconds
PROGRESS_INTERVAL = 10.0                    # seconds


DEFAULTS = {
    "timeout": 300.0,
    "workers": 0,
    "validate_urls": False,
    "verbose": False,
}


# ============================================================================
# Built-in pattern tables
# ============================================================================

DEFAULT_KEYWORDS = (
    "admin", "administrator", "backup", "bak", "config", "configuration",
    "credential", "creds", "dashboard", "database", "debug", "dump", "export",
    "internal", "login", "logs", "passwd", "password", "private", "secret",
    "settings", "setup", "shell", "staging", "token", "upload", "api_key",
    "apikey", "access_key", "auth", "jwt", "session", "phpinfo", "test",
)

DEFAULT_EXTENSIONS = (
    ".php", ".asp", ".aspx", ".jsp", ".inc", ".bak", ".zip", ".gz", ".tar",
    ".dat", ".json", ".env", ".conf", ".xml", ".yml", ".yaml", ".csv", ".log",
    ".txt", ".sql", ".db", ".backup", ".tar.gz", ".tar.bz2", ".7z", ".md",
    ".pem", ".key", ".crt", ".cer", ".p12", ".pfx", ".sh", ".pl", ".rb",
    ".exe", ".dll", ".msi", ".apk", ".ipa", ".html", ".js", ".css", ".scss",
    ".less", ".h", ".cpp", ".c", ".py", ".go", ".jar", ".war", ".ear",
    ".class", ".swf", ".jsonld", ".sqlite", ".db3", ".sqlite3", ".orig",
    ".swp", ".swo", ".lock", ".vbs", ".ps1", ".psm1", ".cmd", ".bat",
    ".config", ".ini", ".plist", ".dmg", ".iso", ".deb", ".rpm", ".bin",
    ".md5", ".sha256", ".cna", ".pub", ".gpg", ".asc", ".sql.gz", ".sql.bz2",
    ".sql.xz", ".sql.tgz", ".tar.xz", ".tar.zst", ".zipx", ".tar.lzma",
    ".lzo", ".bzip2", ".xz", ".lzma", ".tgz", ".gzip", ".tar.lz4",
)

DEFAULT_PATHS = (
    "/admin", "/administrator", "/backup", "/backups", "/bin", "/cgi-bin",
    "/config", "/console", "/dashboard", "/db", "/debug", "/dev", "/dump",
    "/etc/passwd", "/internal", "/jenkins", "/logs", "/manage", "/phpmyadmin",
    "/private", "/server-status", "/setup", "/shell", "/staging", "/swagger",
    "/test", "/tmp", "/upload", "/uploads", "/wp-admin", "/wp-config",
    "/wp-content", "/actuator", "/graphql", "/api/v1", "/api/v2", "/.well-known",
)

DEFAULT_HIDDEN = (
    ".env", ".git", ".gitignore", ".htpasswd", ".htaccess", ".idea", ".vscode",
    ".npmrc", ".DS_Store", ".dockerfile", ".travis.yml", ".yarn.lock",
    ".editorconfig", ".bashrc", ".bash_profile", ".zshrc", ".ssh",
    ".gitmodules", ".history", ".npm-debug.log", ".gitattributes",
    ".dockerignore", ".config", ".env.production", ".env.local",
    ".env.development", ".env.staging", ".env.testing", ".gitlab-ci.yml",
    ".gitconfig", ".credentials", ".heroku.yml", ".rails",
    ".credentials.yml.enc", ".config/database.yml", ".terraform", ".pylintrc",
    ".flake8", ".vimrc", ".bash_history", ".profile", ".zprofile", ".m2",
    ".gradle", ".python-version", ".ruby-version", ".yarnrc", ".envrc",
    ".docker-compose.yml", ".env.example", ".github", ".terraformrc",
    ".composer.json", ".composer.lock", ".eslintrc.json", ".aws", ".kube",
    ".vagrant", ".circleci", ".svn", ".git-credentials", ".subversion",
    ".bundle", ".jenkins", ".firebase", ".firebase.json", ".pyc", ".coverage",
    ".nyc_output", ".devcontainer", ".buildspec.yml", ".sqlitedb",
)
