"""
Domain constants shared across the assembler.

Reserved front-matter fields, naming prefixes and output locations.
"""

# =============================================================================
# Reserved Front-Matter Fields
# =============================================================================
# dna:   tags a material exposes to the cross-reference scanner
# notes: Markdown rendered onto the collection entry, never namespaced
# order: sort key inside a collection
# helix: computed cross-reference annotation (written by the scanner)

FIELD_DNA = "dna"
FIELD_NOTES = "notes"
FIELD_ORDER = "order"
FIELD_HELIX = "helix"

# View-only fields
FIELD_LAYOUT = "layout"
FIELD_DEST = "dest"
FIELD_DEST_COPY = "dest-copy"
FIELD_BASEURL = "baseurl"

# =============================================================================
# Identifiers
# =============================================================================

SERIAL_PREFIX = "btr-"
SERIAL_KEY = b"serial"

# Materials whose file name starts with this are partial-only (not listed)
HIDDEN_MATERIAL_PREFIX = "__"

# =============================================================================
# Output
# =============================================================================

RUN_LOG_DIRNAME = ".assembly"
OUTPUT_EXTENSION = ".html"
