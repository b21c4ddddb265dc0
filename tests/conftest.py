import imaplib
import logging
import re
import socketserver
import threading

import pytest

from imap_roadrunner import session as session_mod
from imap_roadrunner.models import Target

MESSAGES = [
    b"Subject: lunch with ben\r\nFrom: a@example.com\r\n\r\n"
    b"See you at noon.\r\n",
    b"Subject: release notes\r\nFrom: b@example.com\r\n\r\n"
    b"The nova build is out, with a much longer body than the first.\r\n",
]


def header_of(message: bytes) -> bytes:
    return message.split(b"\r\n\r\n", 1)[0] + b"\r\n\r\n"


def _parse_set(seq: str, count: int):
    if not seq:
        raise imaplib.IMAP4.error("FETCH command error: BAD [b'Invalid set']")
    if ":" in seq:
        lo, hi = seq.split(":")
        return list(range(int(lo), int(hi) + 1))
    return [int(seq)]


class FakeIMAP:
    """Stands in for imaplib.IMAP4 with the same return conventions."""

    def __init__(self, messages=None, password="secret", preauth=False,
                 mailboxes=("Inbox",)):
        self.messages = list(MESSAGES if messages is None else messages)
        self.password = password
        self.mailboxes = set(mailboxes)
        self.state = "AUTH" if preauth else "NONAUTH"
        self.expunged = set()
        self.search_reply = None
        self.fetch_error = None
        self.logins = 0
        self.logged_out = False
        self.untagged_responses = {}
        self.literal = None
        self.calls = []

    def login(self, user, password):
        self.logins += 1
        if password != self.password:
            raise imaplib.IMAP4.error("[AUTHENTICATIONFAILED] LOGIN failed")
        self.state = "AUTH"
        return "OK", [b"LOGIN completed"]

    def select(self, mailbox="INBOX", readonly=False):
        self.calls.append(("select", mailbox, readonly))
        if mailbox not in self.mailboxes:
            self.state = "AUTH"
            return "NO", [b"Mailbox doesn't exist"]
        self.state = "SELECTED"
        return "OK", [str(len(self.messages)).encode()]

    def fetch(self, message_set, message_parts):
        self.calls.append(("fetch", message_set, message_parts))
        if self.fetch_error is not None:
            raise self.fetch_error
        ids = _parse_set(message_set, len(self.messages))
        if any(i in self.expunged for i in ids):
            return "NO", [b"Some messages could not be FETCHed"]
        data = []
        for i in ids:
            msg = self.messages[i - 1]
            if "RFC822.HEADER" in message_parts:
                payload, item = header_of(msg), "RFC822.HEADER"
            else:
                payload, item = msg, "BODY[]"
            prefix = (
                f"{i} (FLAGS (\\Seen) RFC822.SIZE {len(msg)} "
                f"{item} {{{len(payload)}}}"
            )
            data.append((prefix.encode(), payload))
            data.append(b")")
        return "OK", data

    def search(self, charset, *criteria):
        self.calls.append(("search",) + criteria)
        if self.search_reply is not None:
            if isinstance(self.search_reply, Exception):
                raise self.search_reply
            return self.search_reply
        if charset:
            (field,), term = criteria, self.literal.decode(charset)
            self.literal = None
        else:
            field, term = criteria
        term = term.strip('"').lower()
        hits = []
        for i, msg in enumerate(self.messages, 1):
            head, _, body = msg.partition(b"\r\n\r\n")
            text = head if field == "SUBJECT" else body
            if term.encode() in text.lower():
                hits.append(str(i).encode())
        return "OK", [b" ".join(hits)]

    def logout(self):
        self.state = "LOGOUT"
        self.logged_out = True
        return "BYE", [b"LOGOUT received"]


@pytest.fixture
def log():
    return logging.getLogger("imap-roadrunner")


@pytest.fixture
def target():
    return Target(
        host="imap.test", user="ben", password="secret", mailbox="Inbox"
    )


@pytest.fixture
def fake_imap():
    return FakeIMAP()


@pytest.fixture
def dial(monkeypatch, fake_imap):
    """Route connections to fake_imap and record dial attempts."""
    dialed = []

    def _dial(target):
        dialed.append(target)
        return fake_imap

    monkeypatch.setattr(session_mod, "imap_dial", _dial)
    return dialed


class ScriptedIMAPHandler(socketserver.StreamRequestHandler):
    """Speaks just enough IMAP4rev1 for a real imaplib client."""

    def handle(self):
        self.send(b"* OK IMAP4rev1 test server ready")
        while True:
            line = self.read_command()
            if line is None:
                return
            tag, _, rest = line.partition(b" ")
            self.server.received.append(rest)
            command = rest.split(b" ", 1)[0].upper().decode("ascii")
            handler = getattr(self, "do_" + command, None)
            if handler is None:
                self.send(tag + b" BAD unknown command")
            elif handler(tag, rest) is False:
                return

    def send(self, *lines):
        for line in lines:
            self.wfile.write(line + b"\r\n")

    def read_command(self):
        """One command line with any literals spliced in."""
        data = b""
        line = self.rfile.readline()
        while line:
            literal = re.search(rb"\{(\d+)\}\r\n$", line)
            if literal is None:
                return data + line.rstrip(b"\r\n")
            data += line[:literal.start()]
            self.send(b"+ go ahead")
            data += self.rfile.read(int(literal.group(1)))
            line = self.rfile.readline()
        return None

    def do_CAPABILITY(self, tag, rest):
        self.send(b"* CAPABILITY IMAP4rev1", tag + b" OK done")

    def do_LOGIN(self, tag, rest):
        mode = self.server.login_mode
        if mode == "drop":
            return False
        if mode == "bye":
            self.send(
                b"* BYE Too many login failures",
                tag + b" NO [AUTHENTICATIONFAILED] Authentication failed",
            )
        elif rest.endswith(b' "secret"'):
            self.send(tag + b" OK LOGIN completed")
        else:
            self.send(tag + b" NO [AUTHENTICATIONFAILED] Invalid credentials")

    def do_SELECT(self, tag, rest):
        name = rest.split(b" ", 1)[1]
        if name not in self.server.mailboxes:
            self.send(tag + b" NO Mailbox doesn't exist")
            return
        count = len(self.server.messages)
        self.send(b"* %d EXISTS" % count, tag + b" OK completed")

    do_EXAMINE = do_SELECT

    def do_FETCH(self, tag, rest):
        seq = rest.split(b" ")[1].decode("ascii")
        for i in _parse_set(seq, len(self.server.messages)):
            payload = self.server.messages[i - 1]
            self.wfile.write(
                b"* %d FETCH (BODY[] {%d}\r\n" % (i, len(payload))
                + payload + b")\r\n"
            )
        self.send(tag + b" OK FETCH completed")

    def do_SEARCH(self, tag, rest):
        self.send(b"* SEARCH 1", tag + b" OK SEARCH completed")

    def do_LOGOUT(self, tag, rest):
        self.send(b"* BYE logging out", tag + b" OK LOGOUT completed")
        return False


class LocalIMAPServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, messages):
        super().__init__(("127.0.0.1", 0), ScriptedIMAPHandler)
        self.messages = list(messages)
        self.mailboxes = {b"Inbox"}
        self.login_mode = "ok"
        self.received = []

    @property
    def port(self):
        return self.server_address[1]


@pytest.fixture
def imap_server():
    """A one-message IMAP server on localhost for real imaplib clients."""
    server = LocalIMAPServer(MESSAGES[:1])
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def local_target(imap_server):
    return Target(
        host="127.0.0.1", port=imap_server.port, user="ben",
        password="secret", mailbox="Inbox", timeout=5,
    )
