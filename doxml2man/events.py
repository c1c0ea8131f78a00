"""
   Doxygen XML event source
   ========================

   Feeds a doxygen XML byte stream through an lxml target parser and hands
   out the resulting start / text / end events one at a time, finishing
   with a single end-of-stream event.

   :license: BSD.
"""
import collections
import contextlib
import lxml.etree as ET

START = 'start'
TEXT  = 'text'
END   = 'end'
EOF   = 'eof'

CHUNK_SIZE = 16384

Event = collections.namedtuple('Event', ['kind', 'tag', 'attrib', 'text'])


class ReadError(Exception):
    """The event source could not produce the next event."""


class _EventCollector(object):
    # lxml parser target, every callback turns into a queued event
    def __init__(self, events):
        self.events = events

    def start(self, tag, attrib):
        self.events.append(Event(START, tag, dict(attrib), None))

    def end(self, tag):
        self.events.append(Event(END, tag, None, None))

    def data(self, data):
        self.events.append(Event(TEXT, None, None, data))

    def close(self):
        self.events.append(Event(EOF, None, None, None))


class EventReader(object):
    def __init__(self, stream, name=None, chunk_size=CHUNK_SIZE):
        if name is None:
            name = getattr(stream, 'name', '<stream>')
        self.name = name
        self._stream = stream
        self._chunk_size = chunk_size
        self._events = collections.deque()
        self._parser = ET.XMLParser(target=_EventCollector(self._events),
                                    remove_comments=True, remove_pis=True)
        self._closed = False

    def next(self):
        while not self._events:
            if self._closed:
                raise ReadError("%s: read past end of document" % self.name)
            self._fill()
        return self._events.popleft()

    def _fill(self):
        try:
            chunk = self._stream.read(self._chunk_size)
            if chunk:
                self._parser.feed(chunk)
            else:
                self._closed = True
                self._parser.close()
        except ET.XMLSyntaxError as e:
            self._closed = True
            raise ReadError("%s: %s" % (self.name, e))
        except OSError as e:
            self._closed = True
            raise ReadError("%s: %s" % (self.name, e))


@contextlib.contextmanager
def open_events(path):
    with open(path, 'rb') as stream:
        yield EventReader(stream, path)


def iter_children(reader, stop_tag):
    """Yield events until the end of `stop_tag`, which is consumed."""
    while True:
        event = reader.next()
        if event.kind == END and event.tag == stop_tag:
            return
        if event.kind == EOF:
            raise ReadError("%s: document ended inside <%s>" %
                            (reader.name, stop_tag))
        yield event


def attr(event, name):
    if event.attrib is None:
        return ''
    return event.attrib.get(name, '')
