"""
   Structure resolver
   ==================

   Parameters only tell us the refid of the structures they use. Doxygen
   writes every struct into its own <refid>.xml file, so once the main
   file is read those are opened one by one and the full definitions read
   in. Anything that cannot be found is left out.

   :license: BSD.
"""
import os

from .builder import collect_text, read_structure_member
from .events import START, EOF, ReadError, iter_children, open_events
from .model import Structure, ENUM, STRUCT


def structure_path(xml_dir, refid):
    return os.path.join(xml_dir, refid + '.xml')

def read_structure(reader):
    """Read the body of a struct <compounddef>."""
    structure = Structure(STRUCT)
    for event in iter_children(reader, 'compounddef'):
        if event.kind != START:
            continue
        tag = event.tag
        if tag == 'compoundname':
            structure.name = collect_text(reader, tag)
        elif tag == 'briefdescription':
            structure.brief = collect_text(reader, tag).strip()
        elif tag == 'detaileddescription':
            structure.desc = collect_text(reader, tag).strip()
        elif tag == 'includes':
            collect_text(reader, tag)
        elif tag == 'memberdef':
            structure.members.append(read_structure_member(reader, tag))
    return structure

def read_structure_file(reader):
    structure = None
    while True:
        event = reader.next()
        if event.kind == EOF:
            return structure
        if event.kind == START and event.tag == 'compounddef':
            structure = read_structure(reader)

def resolve_structures(structures, xml_dir):
    """Return a new refid map with every structure fully read in."""
    resolved = {}

    for refid in sorted(structures):
        structure = structures[refid]
        if structure.kind == ENUM:
            resolved[refid] = structure
            continue

        path = structure_path(xml_dir, refid)
        if not os.path.isfile(path):
            continue
        try:
            with open_events(path) as reader:
                structure = read_structure_file(reader)
        except (ReadError, OSError):
            continue
        if structure is not None:
            resolved[refid] = structure

    return resolved
