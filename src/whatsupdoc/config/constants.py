"""Configuration constants.

Values here are protocol constraints of the comment language and are NOT
user-configurable. For configurable values, see models.py.
"""

DOC_OPT_IN_PATTERN = r"^whatsupdoc\s*$"
"""Body of the ``/*whatsupdoc*/`` comment that opts a file into batch parsing."""

TAB_WIDTH_MIN = 1
TAB_WIDTH_MAX = 16
"""Valid tab expansion widths."""

CONFIG_FILE_NAME = ".whatsupdoc.yaml"
"""Per-project YAML config file, looked up in the config root."""

ENV_PREFIX = "WHATSUPDOC__"
"""Environment variable prefix (WHATSUPDOC__SECTION__KEY)."""
