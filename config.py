import os

# Log level name for the command-line tool (DEBUG, INFO, WARNING, ...)
DEFAULT_LOG_LEVEL = os.getenv("NODE2DOC_LOG_LEVEL", "INFO")

# Where `render` writes when --output-docx is not given
DEFAULT_OUTPUT_DOCX = os.getenv("NODE2DOC_OUTPUT_DOCX", "output.docx")
