"""Tests for laying out man pages."""

import io

import pytest

from doxml2man.builder import parse_doxml
from doxml2man.events import open_events
from doxml2man.formatter import (MAX_STRUCT_COMMENT_LEN, NO_POINTER,
                                 PageConfig, column_widths,
                                 format_ascii_page, format_man_page,
                                 len_without_formatting, split_pointer,
                                 write_long_comment, write_long_string,
                                 write_param, write_params, write_structure)
from doxml2man.model import Function, Param, Structure, STRUCT
from doxml2man.resolver import resolve_structures, structure_path

COPYRIGHT = 'Copyright (C) 2010-2024 Red Hat Inc, All rights reserved'


def _config(**kwargs):
    kwargs.setdefault('copyright', COPYRIGHT)
    kwargs.setdefault('header_prefix', 'qb/')
    return PageConfig('qbfoo.h', '2024-01-01', **kwargs)


def _write(writer, *args):
    f = io.StringIO()
    writer(f, *args)
    return f.getvalue()


def _pages(xml_dir, **kwargs):
    with open_events(structure_path(xml_dir, 'qbfoo_8h')) as reader:
        headerfile, functions, structures = parse_doxml(reader)
    structures = resolve_structures(structures, xml_dir)
    config = _config(**kwargs)
    return dict((f.name, format_man_page(f, functions, structures, config))
                for f in functions)


@pytest.mark.parametrize('typ, expected', [
    ('int',      ('int', NO_POINTER)),
    ('char *',   ('char ', ' *')),
    ('char **',  ('char ', '**')),
    ('void (*',  ('void ', '(*')),
    ('int ***',  ('int *', '**')),
    ('*',        ('', ' *')),
    ('',         ('', NO_POINTER)),
])
def test_split_pointer(typ, expected):
    assert split_pointer(typ) == expected


def test_len_without_formatting():
    assert len_without_formatting('plain') == 5
    assert len_without_formatting('\\fBbold\\fR') == 6
    assert len_without_formatting('') == 0


def test_column_widths_skip_long_types():
    params = [Param('a', 'int'),
              Param('callback', 'void (*' + 'x' * 80),
              Param('buf', 'char *', '[16]')]
    assert column_widths(params) == (6, 8)


def test_long_comment_wraps_at_80_columns():
    text = _write(write_long_comment, ' '.join(['abcd'] * 20))
    assert text == '    \\fP/*\n' \
                   '     *' + ' abcd' * 18 + '\n' \
                   '     *' + ' abcd' * 2 + '\n' \
                   '     */\n'


def test_long_comment_single_line():
    desc = ' '.join(['word'] * 11 + ['words'])
    assert len(desc) == 60
    assert _write(write_long_comment, desc) == \
        '    \\fP/*\n     * ' + desc + '\n     */\n'


def test_identifier_column_lines_up():
    params = [Param('a', 'int'),
              Param('name', 'const char *'),
              Param('argv', 'char **'),
              Param('fn', 'void (*', ')(void)')]
    type_width, _ = column_widths(params)
    text = _write(write_params, params, type_width, 0, True, ',')
    lines = text.splitlines()
    assert len(lines) == 4
    assert len(set(line.index('\\fI') for line in lines)) == 1
    assert lines[0] == '    \\fBint           \\fIa\\fB\\fR,'
    assert lines[3] == '    \\fBvoid        (*\\fIfn\\fB)(void)\\fR'


def test_short_comment_inline_only_with_name_width():
    param = Param('size', 'int', desc='bytes')
    assert _write(write_param, param, 3, 0, False, ';') == \
        '    \\fRint  \\fIsize\\fB\\fR;\n'
    assert _write(write_param, param, 3, 6, False, ';') == \
        '    \\fRint  \\fIsize\\fB\\fR;\\fP    /* bytes */\n'


def test_comment_budget_ignores_escapes():
    desc = '\\fB' + 'x' * (MAX_STRUCT_COMMENT_LEN - 1) + '\\fR'
    assert len_without_formatting(desc) == MAX_STRUCT_COMMENT_LEN + 1
    text = _write(write_param, Param('n', 'int', desc=desc), 3, 1, False, '')
    assert text.startswith('    \\fP/*\n')

    desc = '\\fB' + 'x' * (MAX_STRUCT_COMMENT_LEN - 2) + '\\fR'
    text = _write(write_param, Param('n', 'int', desc=desc), 3, 1, False, '')
    assert '/*' not in text.split('\\fIn')[0]
    assert text.endswith('/* %s */\n' % desc)


def test_write_struct(qbfoo, xml_dir):
    foo = resolve_structures(qbfoo[2], xml_dir)['structfoo']
    assert _write(write_structure, foo) == \
        'A foo.\n' \
        '\n.nf\n\\fB\n' \
        'struct foo {\n' \
        '    \\fRint     \\fIsize\\fB\\fR;\\fP     /* Size of the foo. */\n' \
        '    \\fRchar   *\\fIbuf\\fB[16]\\fR\n' \
        '};\\fP\n.PP\n.fi\n'


def test_write_enum(qbfoo):
    colour = qbfoo[2]['qbfoo_8h_1colour']
    assert _write(write_structure, colour) == \
        'Colours.\n' \
        '\n.nf\n\\fB\n' \
        'enum colour {\n' \
        '    \\fR  \\fIRED\\fB\\fR;\\fP    /* Red. */\n' \
        '    \\fR  \\fIGREEN\\fB\\fR\\fP   /* Green. */\n' \
        '};\\fP\n.PP\n.fi\n'


def test_long_member_comment_goes_before_member():
    desc = ' '.join(['long'] * 15)
    s = Structure(STRUCT, 'bar', members=[Param('x', 'int', desc=desc),
                                          Param('y', 'int', desc='short')])
    text = _write(write_structure, s)
    assert '    \\fP/*\n     * ' + desc + '\n     */\n' \
           '    \\fRint  \\fIx\\fB\\fR;\n' in text
    assert '    \\fRint  \\fIy\\fB\\fR\\fP   /* short */\n' in text


def test_long_string_keeps_listings():
    text = _write(write_long_string, 'One.\n.nf\ncode();\n.fi\nTwo.')
    assert text == 'One.\n.PP\n\n.nf\ncode();\n.fi\n\nTwo.\n.PP\n'


def test_scenario_plain_int_param():
    f = Function()
    f.name = 'f'
    f.definition = 'void f'
    f.params = [Param('count', 'int')]
    page = format_man_page(f, [f], {}, _config(print_params=True))
    assert '\\fBvoid f\\fP(\n    \\fBint  \\fIcount\\fB\\fR\n);\n' in page
    assert '/*' not in page
    assert '.SH PARAMETERS' not in page


def test_scenario_pointer_param_with_long_description():
    desc = ' '.join(['word'] * 11 + ['words'])
    f = Function()
    f.name = 'f'
    f.definition = 'void f'
    f.params = [Param('handle', 'struct foo *', desc=desc)]
    page = format_man_page(f, [f], {}, _config())
    assert '\\fBvoid f\\fP(\n' \
           '    \\fP/*\n     * ' + desc + '\n     */\n' \
           '    \\fBstruct foo   *\\fIhandle\\fB\\fR\n' in page


def test_page_sections(xml_dir):
    page = _pages(xml_dir, print_params=True)['foo_open']
    assert page.startswith(
        '.\\"  Automatically generated man page, do not edit\n'
        '.TH FOO_OPEN 3 2024-01-01 "Package" "Programmer\'s Manual"\n'
        '.SH NAME\n.PP\nfoo_open \\- Open a foo.\n'
        '.SH SYNOPSIS\n.PP\n.nf\n.B #include <qb/qbfoo.h>\n.sp\n'
        '\\fBint foo_open\\fP(\n'
        '    \\fBstruct foo   *\\fIhandle\\fB\\fR,\n'
        '    \\fBconst char   *\\fIname\\fB\\fR,\n'
        '    \\fBenum colour   \\fIc\\fB\\fR\n'
        ');\n.fi\n'
        '.SH PARAMETERS\n.PP\n'
        '.TP\n\\fBhandle\\fP the foo\n'
        '.TP\n\\fBname\\fP name of the foo\n'
        '.TP\n\\fBc\\fP \n'
        '.SH DESCRIPTION\n.PP\n'
        'Opens the foo for \\fBreading\\fR.\n.PP\n\n.PP\n'
        '.SH STRUCTURES\n.PP\n')
    assert '.SH RETURN VALUE\n.PP\n0 on success\n.br\n' \
           '.TP\n\\fB-EINVAL\\fR bad arguments\n.PP\n' in page
    assert '.SH NOTE\n.PP\nNot thread safe.\n.PP\n' in page
    assert page.endswith(
        '.SH SEE ALSO\n.PP\n.nh\n.ad l\n'
        '\\fIfoo_close\\fP(3), \n'
        '\\fIfoo_log\\fP(3), \n'
        '\\fIqbfoo.h\\fP(3)\n'
        '.SH COPYRIGHT\n.PP\n' + COPYRIGHT + '\n')

    order = ['.SH NAME', '.SH SYNOPSIS', '.SH PARAMETERS', '.SH DESCRIPTION',
             '.SH STRUCTURES', '.SH RETURN VALUE', '.SH NOTE', '.SH SEE ALSO',
             '.SH COPYRIGHT']
    positions = [page.index(s) for s in order]
    assert positions == sorted(positions)

    # enum sorts before struct by refid
    assert page.index('enum colour {') < page.index('struct foo {')


def test_no_params_section_unless_asked(xml_dir):
    assert '.SH PARAMETERS' not in _pages(xml_dir)['foo_open']


def test_structure_printed_once_per_page(xml_dir):
    pages = _pages(xml_dir)
    assert pages['foo_open'].count('struct foo {') == 1
    assert pages['foo_close'].count('struct foo {') == 1


def test_unresolved_structure_has_no_section(xml_dir):
    page = _pages(xml_dir)['foo_log']
    assert '.SH STRUCTURES' not in page
    assert '    \\fBqb_log_t   *\\fIlog\\fB\\fR\n' in page


def test_listing_in_description(xml_dir):
    page = _pages(xml_dir)['foo_close']
    assert '.SH DESCRIPTION\n.PP\n' \
           'Closes the foo.\n.PP\n\n.nf\nint rc = foo_close(h);\n.fi\n\n' \
           in page


def test_general_page(xml_dir):
    assert _pages(xml_dir)['qbfoo.h'] is None

    page = _pages(xml_dir, print_general=True)['qbfoo.h']
    assert '.TH QBFOO.H 3 ' in page
    assert 'qbfoo.h \\- The foo API.\n' in page
    assert '.B #include <qb/qbfoo.h>\n.fi\n' in page
    assert '.SH DESCRIPTION\n.PP\nEverything about foos.\n.PP\n' in page
    assert '.SH DEFINES\n.PP\n' \
           '.PP\nMaximum size.\n.br\n#define MAXSIZE 1024\n.br\n' in page
    assert '#define maxsize' not in page
    assert page.endswith('\\fIfoo_log\\fP(3)\n'
                         '.SH COPYRIGHT\n.PP\n' + COPYRIGHT + '\n')


def test_no_copyright():
    f = Function()
    f.name = 'f'
    page = format_man_page(f, [f], {}, _config(copyright=''))
    assert '.SH COPYRIGHT' not in page


def test_same_input_same_output(xml_dir):
    assert _pages(xml_dir, print_general=True) == \
        _pages(xml_dir, print_general=True)


def test_ascii_page(qbfoo, xml_dir):
    functions = qbfoo[1]
    structures = resolve_structures(qbfoo[2], xml_dir)
    text = format_ascii_page(functions[0], structures)
    lines = text.splitlines()
    assert lines[0] == 'FUNCTION int foo_open ' \
        '(struct foo *handle, const char *name, enum colour c)'
    assert '  PARAM: struct foo * handle (refid=structfoo)' in lines
    assert '  PARAM desc: the foo' in lines
    assert '  PARAM: const char * name' in lines
    assert 'STRUCTURE: foo' in lines
    assert '   MEMB: char * buf[16]' in lines
    assert lines[-1] == '----------------------'
