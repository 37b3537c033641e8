"""Constants shared across the jarreplace domain."""

JAR_EXTENSION = "jar"

# Qualified variants searched next to the plain ``<artifact>-<version>.jar``.
QUALIFIED_SUFFIXES = ("-all", "-sources", "-javadoc")

TEMP_SUFFIX = ".tmp"
CHECKSUM_SUFFIX = ".sha1"
BACKUP_MARKER = ".backup."

DRY_RUN_PREFIX = "[DRY RUN]"
