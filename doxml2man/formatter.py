"""
   Document model to troff
   =======================

   Lays out one man page per function. Parameter lists and structure
   members are lined up in columns, with pointer asterisks moved next to
   the name so that pointers and plain types align on the identifier.

   :license: BSD.
"""
import io
import re

from .model import ENUM

# How long a parameter type can get before we stop lining everything up.
# Function pointer types (with all *their* parameters) get very long.
MAX_PRINT_PARAM_LEN = 80

# Longest member comment that still goes on the same line as the member
MAX_STRUCT_COMMENT_LEN = 50

COMMENT_WRAP_COLUMN = 80

NO_POINTER = '  '

_pointer_pattern = re.compile(r"^(.*?)(\*\*|\(\*|\*)$", re.DOTALL)
_pointer_markers = {'*'  : ' *',
                    '**' : '**',
                    '(*' : '(*'}


class PageConfig(object):
    def __init__(self, headerfile, date, copyright='', print_params=False,
                 print_general=False, man_section=3, package_name='Package',
                 header="Programmer's Manual", header_prefix=''):
        self.headerfile = headerfile
        self.date = date
        self.copyright = copyright
        self.print_params = print_params
        self.print_general = print_general
        self.man_section = man_section
        self.package_name = package_name
        self.header = header
        self.header_prefix = header_prefix


def len_without_formatting(text):
    """Length of text with troff escapes (eg. \\fB) counted as one char."""
    length = 0
    escape = False
    for c in text:
        if c == '\\':
            escape = True
        elif escape:
            escape = False
        else:
            length += 1
    return length

def split_pointer(typ):
    """
    Split a type into its base and an indirection marker:
    'char *' -> ('char ', ' *'), 'char **' -> ('char ', '**'),
    'void (*' -> ('void ', '(*'), 'int' -> ('int', '  ').
    """
    match = _pointer_pattern.match(typ)
    if match is None:
        return typ, NO_POINTER
    return match.group(1), _pointer_markers[match.group(2)]

def column_widths(params):
    type_width = 0
    name_width = 0
    for p in params:
        if len(p.type) < MAX_PRINT_PARAM_LEN and len(p.type) > type_width:
            type_width = len(p.type)
        if len(p.name) + len(p.args) > name_width:
            name_width = len(p.name) + len(p.args)
    return type_width, name_width


############################### writers #####################################

def write_long_comment(f, comment):
    f.write("    \\fP/*\n")
    f.write("     *")

    column = 7
    for word in comment.split():
        column += len(word)
        if column > COMMENT_WRAP_COLUMN:
            f.write("\n     *")
            column = 7
        f.write(" %s" % word)
    f.write("\n     */\n")

def write_param(f, param, type_width, name_width, bold, delimiter):
    base, marker = split_pointer(param.type)
    comment = param.desc or param.brief
    comment_len = len_without_formatting(comment)

    # long comments go on their own lines before the entry
    if comment_len > MAX_STRUCT_COMMENT_LEN:
        write_long_comment(f, comment)

    if bold:
        f.write("    \\fB")
    else:
        f.write("    \\fR")
    f.write("%s%s\\fI%s\\fB%s\\fR%s" % (base.ljust(type_width), marker,
                                        param.name, param.args, delimiter))

    if 0 < comment_len <= MAX_STRUCT_COMMENT_LEN and name_width > 0:
        pad = 1 + name_width - len(param.name) - len(param.args) - \
              len(delimiter)
        f.write("\\fP %s /* %s */" % (" " * max(pad, 0), comment))
    f.write("\n")

def write_params(f, params, type_width, name_width, bold, delimiter):
    last = len(params) - 1
    for i, param in enumerate(params):
        write_param(f, param, type_width, name_width, bold,
                    '' if i == last else delimiter)

def write_structure(f, structure):
    if structure.brief:
        f.write("%s\n" % structure.brief)
    if structure.desc:
        f.write("%s\n" % structure.desc)

    type_width, name_width = column_widths(structure.members)

    f.write("\n.nf\n\\fB\n")
    if structure.kind == ENUM:
        f.write("enum %s {\n" % structure.name)
    else:
        f.write("struct %s {\n" % structure.name)
    write_params(f, structure.members, type_width, name_width, False, ';')
    f.write("};\\fP\n.PP\n.fi\n")

def write_long_string(f, text):
    """Write paragraphs, leaving .nf/.fi program listings alone."""
    in_nf = False
    for line in text.splitlines():
        if line.startswith('.nf'):
            f.write("\n")
            in_nf = True

        f.write("%s\n" % line)

        if not in_nf:
            f.write(".PP\n")

        if line.startswith('.fi'):
            f.write("\n")
            in_nf = False


############################### man pages ###################################

def format_man_page(function, functions, structures, config):
    """
    Return the troff text of the man page for `function`, or None for the
    general page of the header unless that was asked for.
    """
    if function.general and not config.print_general:
        return None

    f = io.StringIO()
    section = config.man_section

    type_width, _ = column_widths(function.params)
    num_param_descs = len([p for p in function.params if p.desc and p.type])

    f.write(".\\\"  Automatically generated man page, do not edit\n")
    f.write(".TH %s %s %s \"%s\" \"%s\"\n" %
            (function.name.upper(), section, config.date,
             config.package_name, config.header))

    f.write(".SH NAME\n.PP\n")
    if function.brief:
        f.write("%s \\- %s\n" % (function.name, function.brief))
    else:
        f.write("%s\n" % function.name)

    f.write(".SH SYNOPSIS\n.PP\n.nf\n")
    f.write(".B #include <%s%s>\n" % (config.header_prefix, config.headerfile))
    if function.definition:
        f.write(".sp\n")
        f.write("\\fB%s\\fP(\n" % function.definition)
        write_params(f, function.params, type_width, 0, True, ',')
        f.write(");\n")
    f.write(".fi\n")

    if config.print_params and num_param_descs > 0:
        f.write(".SH PARAMETERS\n.PP\n")
        for p in function.params:
            f.write(".TP\n")
            f.write("\\fB%s\\fP %s\n" % (p.name, p.desc))

    if function.detail:
        f.write(".SH DESCRIPTION\n.PP\n")
        write_long_string(f, function.detail)

    # refids we cannot find don't get a header
    found = [structures[r] for r in function.refids if r in structures]
    if found:
        f.write(".SH STRUCTURES\n.PP\n")
        for structure in found:
            write_structure(f, structure)

    if function.returnval or function.retvals:
        f.write(".SH RETURN VALUE\n.PP\n")
        if function.returnval:
            f.write("%s\n.br\n" % function.returnval)
        for rv in function.retvals:
            f.write(".TP\n")
            f.write("\\fB%s\\fR %s\n" % (rv.name, rv.desc))
        f.write(".PP\n")

    # only ALLCAPS defines, for neatness
    defines = [d for d in function.defines if d.name == d.name.upper()]
    if defines:
        f.write(".SH DEFINES\n.PP\n")
        for d in defines:
            if d.brief:
                f.write(".PP\n%s\n.br\n" % d.brief)
            if d.desc:
                f.write(".br\n%s\n.br\n" % d.desc)
            f.write("#define %s %s\n.br\n" % (d.name, d.init))

    if function.note:
        f.write(".SH NOTE\n.PP\n")
        write_long_string(f, function.note)

    f.write(".SH SEE ALSO\n.PP\n.nh\n.ad l\n")
    related = [func.name for func in functions if func.name != function.name]
    for i, name in enumerate(related):
        delim = '' if i == len(related) - 1 else ', '
        f.write("\\fI%s\\fP(%s)%s\n" % (name, section, delim))

    if config.copyright:
        f.write(".SH COPYRIGHT\n.PP\n%s\n" % config.copyright)

    return f.getvalue()

def format_ascii_page(function, structures):
    """Plain dump of what was parsed for a function, for debugging."""
    lines = ["FUNCTION %s %s %s" % (function.type, function.name,
                                    function.argsstring)]
    for p in function.params:
        if p.refid is not None:
            lines.append("  PARAM: %s %s%s (refid=%s)" %
                         (p.type, p.name, p.args, p.refid))
        else:
            lines.append("  PARAM: %s %s%s" % (p.type, p.name, p.args))
        if p.brief:
            lines.append("  PARAM brief: %s" % p.brief)
        if p.desc:
            lines.append("  PARAM desc: %s" % p.desc)
    lines.append("BRIEF: %s" % function.brief)
    lines.append("DETAIL: %s" % function.detail)

    for refid in function.refids:
        if refid not in structures:
            continue
        s = structures[refid]
        lines.append("STRUCTURE: %s" % s.name)
        if s.brief:
            lines.append("           %s" % s.brief)
        if s.desc:
            lines.append("           %s" % s.desc)
        for m in s.members:
            lines.append("   MEMB: %s %s%s" % (m.type, m.name, m.args))

    lines.append("----------------------")
    return "\n".join(lines) + "\n"
