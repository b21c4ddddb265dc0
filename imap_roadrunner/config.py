"""Configuration constants."""

PLAIN_PORT = 143
TLS_PORT = 993
DEFAULT_FOLDER = "Inbox"
DEFAULT_CYCLES = 3
DEFAULT_SUBJECT_TERM = "ben"
DEFAULT_BODY_TERM = "nova"

# TODO: accept fetch items on the command line
FULL_FETCH_ITEMS = ("INTERNALDATE", "FLAGS", "RFC822.SIZE", "BODY.PEEK[]")
HEADER_FETCH_ITEMS = ("INTERNALDATE", "FLAGS", "RFC822.SIZE", "RFC822.HEADER")

CSV_HEADER = (
    "Cycle", "Message ID", "Message in Bytes",
    "Execution time in secs", "IMAP Command",
)
BANNER = "IMAP Roadrunner at your service"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_CONNECT = 2
EXIT_AUTH = 3
EXIT_MAILBOX = 4
EXIT_SEARCH = 5
