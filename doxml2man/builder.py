"""
   Doxygen XML to document model
   =============================

   A set of mutually recursive collectors, each entered right after the
   start event of the element it handles and returning once that same
   element is closed. Anything a collector does not know about is handed
   to parse_markup(), which translates inline markup to troff escapes.

   :license: BSD.
"""
from .events import START, TEXT, EOF, attr, iter_children
from .model import (Define, Function, Param, ReturnValue, Structure,
                    DEFAULT_HEADERFILE, ENUM, UNKNOWN)


class DetailBits(object):
    """What a <detaileddescription> (or a <para> inside one) carries."""

    def __init__(self):
        self.detail = ''
        self.returns = ''
        self.notes = ''
        self.retvals = []
        self.param_descs = []

    def merge(self, other):
        self.detail += other.detail
        self.returns += other.returns
        self.notes += other.notes
        self.retvals.extend(other.retvals)
        self.param_descs.extend(other.param_descs)


######################### inline markup to troff ############################

def parse_markup(reader, event):
    handler = globals().get('_markup_%s' % event.tag)
    if handler is None:
        # not consumed: its children end up in the caller's text
        return ''
    return handler(reader, event)

def _markup_text(reader, event):
    return collect_text(reader, event.tag)

def _markup_sp(reader, event):
    collect_text(reader, event.tag)
    return ' '

def _markup_emphasis(reader, event):
    return '\\fB' + collect_text(reader, event.tag) + '\\fR'

def _markup_highlight(reader, event):
    # only ever seen "normal" in practice
    text = collect_text(reader, event.tag)
    if attr(event, 'class') != 'normal':
        return '\\fB' + text + '\\fR'
    return text

def _markup_programlisting(reader, event):
    return '\n.nf\n' + collect_text(reader, event.tag) + '\n.fi\n'

def _markup_itemizedlist(reader, event):
    return '\n' + collect_text(reader, event.tag) + '\n'

def _markup_listitem(reader, event):
    return '\n* ' + collect_text(reader, event.tag)

def _markup_note(reader, event):
    return collect_text(reader, event.tag) + '\n'

def _markup_ignore(reader, event):
    collect_text(reader, event.tag)
    return ''


_markup_para                 = _markup_text
_markup_computeroutput       = _markup_text
_markup_codeline             = _markup_text
_markup_ref                  = _markup_text
_markup_simplesect           = _markup_text
_markup_parameterlist        = _markup_text
_markup_parameteritem        = _markup_text
_markup_parameternamelist    = _markup_text
_markup_parametername        = _markup_text
_markup_parameterdescription = _markup_text
_markup_bold                 = _markup_emphasis
_markup_orderedlist          = _markup_itemizedlist
_markup_xrefsect             = _markup_ignore
_markup_xreftitle            = _markup_ignore
_markup_xrefdescription      = _markup_ignore


############################## text collectors ##############################

def collect_text(reader, stop_tag):
    text = ''
    for event in iter_children(reader, stop_tag):
        if event.kind == START:
            text += parse_markup(reader, event)
        elif event.kind == TEXT:
            text += event.text
    return text.rstrip()

def collect_text_and_refid(reader, stop_tag):
    """Like collect_text() but also returns the refid of the last <ref>."""
    text = ''
    refid = None
    for event in iter_children(reader, stop_tag):
        if event.kind == START:
            if event.tag == 'ref':
                refid = attr(event, 'refid') or None
                text += collect_text(reader, event.tag)
            else:
                text += parse_markup(reader, event)
        elif event.kind == TEXT:
            text += event.text
    return text.rstrip(), refid

def collect_parameter_item(reader, stop_tag):
    name = desc = ''
    for event in iter_children(reader, stop_tag):
        if event.kind != START:
            continue
        if event.tag == 'parameternamelist':
            name = collect_text(reader, event.tag).strip()
        elif event.tag == 'parameterdescription':
            desc = collect_text(reader, event.tag).strip()
        else:
            collect_text(reader, event.tag)
    return name, desc

def collect_params(reader, stop_tag):
    descs = []
    for event in iter_children(reader, stop_tag):
        if event.kind != START:
            continue
        if event.tag == 'parameteritem':
            descs.append(collect_parameter_item(reader, event.tag))
        else:
            collect_text(reader, event.tag)
    return descs

def collect_retvals(reader, stop_tag):
    return [ReturnValue(name, desc)
            for name, desc in collect_params(reader, stop_tag)]

def collect_detail_bits(reader, stop_tag):
    """
    Split a detailed description into narrative text, the "return" and
    "note" sections, return value entries and parameter descriptions.
    Nested paragraphs are collected recursively and merged in order.
    """
    bits = DetailBits()
    text = ''

    for event in iter_children(reader, stop_tag):
        if event.kind == TEXT:
            text += event.text
            continue
        if event.kind != START:
            continue

        tag  = event.tag
        kind = attr(event, 'kind')

        if tag == 'para':
            bits.merge(collect_detail_bits(reader, tag))
            bits.detail += '\n'
        elif tag == 'parameterlist':
            if kind == 'retval':
                bits.retvals.extend(collect_retvals(reader, tag))
            elif kind == 'param':
                bits.param_descs.extend(collect_params(reader, tag))
            else:
                text += collect_text(reader, tag)
        elif tag == 'simplesect':
            if kind == 'return':
                bits.returns += collect_text(reader, tag)
            elif kind == 'note':
                bits.notes += collect_text(reader, tag)
            else:
                text += collect_text(reader, tag)
        else:
            text += parse_markup(reader, event)

    bits.detail += text.rstrip()
    return bits

def add_detail_bits(function, bits):
    function.detail += bits.detail
    function.returnval += bits.returns
    function.note += bits.notes
    function.retvals.extend(bits.retvals)
    for name, desc in bits.param_descs:
        for param in function.params:
            if param.name == name:
                param.desc = desc


############################ member collectors ##############################

def collect_function_param(reader, structures):
    param = Param()
    for event in iter_children(reader, 'param'):
        if event.kind != START:
            continue
        text, refid = collect_text_and_refid(reader, event.tag)
        if event.tag == 'type':
            param.type = text
            param.refid = refid
            # remember the structure, it's filled in from its own file later
            if refid is not None and refid not in structures:
                structures[refid] = Structure(UNKNOWN, text)
        elif event.tag == 'declname':
            param.name = text
        elif event.tag == 'array':
            param.args = text
    return param

def collect_function_info(reader, structures):
    function = Function()

    for event in iter_children(reader, 'memberdef'):
        if event.kind != START:
            continue
        tag = event.tag

        if tag == 'type':
            function.type = collect_text(reader, tag)
        elif tag == 'definition':
            function.definition = collect_text(reader, tag)
        elif tag == 'argsstring':
            function.argsstring = collect_text(reader, tag)
        elif tag in ('name', 'compoundname'):
            function.name = collect_text(reader, tag)
        elif tag == 'param':
            param = collect_function_param(reader, structures)
            if param.refid is not None:
                function.refids.append(param.refid)
            function.params.append(param)
        elif tag == 'briefdescription':
            function.brief = collect_text(reader, tag).strip()
        elif tag == 'detaileddescription':
            add_detail_bits(function, collect_detail_bits(reader, tag))
        else:
            collect_text(reader, tag)

    # a structure used by several parameters is only printed once
    function.refids = sorted(set(function.refids))
    return function

def collect_define(reader):
    define = Define()
    for event in iter_children(reader, 'memberdef'):
        if event.kind != START:
            continue
        tag = event.tag
        if tag == 'name':
            define.name = collect_text(reader, tag)
        elif tag == 'initializer':
            define.init = collect_text(reader, tag)
        elif tag == 'briefdescription':
            define.brief = collect_text(reader, tag).strip()
        elif tag == 'detaileddescription':
            define.desc = collect_text(reader, tag).strip()
        else:
            collect_text(reader, tag)
    return define

def read_structure_member(reader, stop_tag):
    member = Param()
    for event in iter_children(reader, stop_tag):
        if event.kind != START:
            continue
        tag = event.tag
        if tag == 'name':
            member.name = collect_text(reader, tag)
        elif tag == 'type':
            member.type = collect_text(reader, tag)
        elif tag == 'argsstring':
            member.args = collect_text(reader, tag)
        elif tag == 'detaileddescription':
            member.desc = collect_text(reader, tag).strip()
        elif tag == 'briefdescription':
            member.brief = collect_text(reader, tag).strip()
        else:
            collect_text(reader, tag)
    return member

def collect_enum(reader):
    enum = Structure(ENUM)
    for event in iter_children(reader, 'memberdef'):
        if event.kind != START:
            continue
        tag = event.tag
        if tag == 'name':
            enum.name = collect_text(reader, tag)
        elif tag == 'enumvalue':
            enum.members.append(read_structure_member(reader, tag))
        elif tag == 'briefdescription':
            enum.brief = collect_text(reader, tag).strip()
        elif tag == 'detaileddescription':
            enum.desc = collect_text(reader, tag).strip()
        else:
            collect_text(reader, tag)
    return enum


################################ top level ##################################

def parse_doxml(reader, headerfile=None):
    """
    Read a whole compound file (eg. qblog_8h.xml).

    Returns (headerfile, functions, structures) where the last function is
    the general page for the header and structures maps refids to what is
    known about them so far.
    """
    functions  = []
    structures = {}
    general    = Function(general=True)

    while True:
        event = reader.next()
        if event.kind == EOF:
            break
        if event.kind != START:
            continue
        tag = event.tag

        if tag == 'memberdef':
            kind = attr(event, 'kind')
            if kind == 'function':
                functions.append(collect_function_info(reader, structures))
            elif kind == 'define':
                general.defines.append(collect_define(reader))
            elif kind == 'enum':
                # enums live in the main file, structs have their own
                structures[attr(event, 'id')] = collect_enum(reader)
            else:
                collect_text(reader, tag)
        elif tag == 'compoundname':
            name = collect_text(reader, tag)
            if headerfile is None:
                headerfile = name
        elif tag == 'briefdescription':
            general.brief += collect_text(reader, tag).strip()
        elif tag == 'detaileddescription':
            add_detail_bits(general, collect_detail_bits(reader, tag))
        else:
            parse_markup(reader, event)

    if headerfile is None:
        headerfile = DEFAULT_HEADERFILE
    general.name = headerfile
    functions.append(general)

    return headerfile, functions, structures
