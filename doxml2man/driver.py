"""
   Doxygen XML to man page converter
   =================================

   Usage: doxml2man [OPTIONS] <xml-file> [<xml-file> ...]

   <xml-file>      - doxygen XML file of a header, relative to the XML
                     directory, usually called <include-file>_8h.xml,
                     eg. qbipcs_8h.xml

   Run doxygen on the headers first, then run this against the XML files
   it created. One man page is written per documented function.

   OPTIONS
   -h or --help                 - print this help message
   -a or --print-ascii          - print ASCII dump of man page data to stdout
   -m or --print-man            - write man page files to <output-dir>
   -P or --print-params         - print PARAMETERS section
   -g or --print-general        - print general man page for the whole header
   -q or --quiet                - run quietly, no progress info printed
   -c or --use-header-copyright - use the Copyright line from the header
                                  file (if one can be found)
   -I or --headerfile=<name>    - include file name (default taken from XML)
   -i or --header-prefix=<pfx>  - prefix for include file, eg. qb/
   -s or --section=<n>          - man page section (default 3)
   -S or --start-year=<year>    - first year on the copyright line (2010)
   -d or --xml-dir=<dir>        - directory of the XML files (./xml/)
   -D or --manpage-date=<date>  - date at the top of the pages (today)
   -Y or --manpage-year=<year>  - last year on the copyright line (this year)
   -p or --package-name=<name>  - package name (Package)
   -H or --header-name=<text>   - header text (Programmer's Manual)
   -o or --output-dir=<dir>     - directory for the man pages (./)
   -O or --header-src-dir=<dir> - directory of the original headers, for -c (./)
   -C or --company=<name>       - company name on the copyright line

   :license: BSD.
"""
import sys
import os
import datetime

from .builder import parse_doxml
from .events import ReadError, open_events
from .formatter import PageConfig, format_ascii_page, format_man_page
from .resolver import resolve_structures


class Options(object):
    def __init__(self):
        self.print_ascii = False
        self.print_man = False
        self.print_params = False
        self.print_general = False
        self.quiet = False
        self.use_header_copyright = False
        self.headerfile = None
        self.header_prefix = ''
        self.man_section = 3
        self.start_year = 2010
        self.xml_dir = './xml/'
        self.manpage_date = ''
        self.manpage_year = 0
        self.package_name = 'Package'
        self.header = "Programmer's Manual"
        self.output_dir = './'
        self.header_src_dir = './'
        self.company = 'Red Hat Inc'


_flags  = {'-a' : 'print_ascii',           '--print-ascii'          : 'print_ascii',
           '-m' : 'print_man',             '--print-man'            : 'print_man',
           '-P' : 'print_params',          '--print-params'         : 'print_params',
           '-g' : 'print_general',         '--print-general'        : 'print_general',
           '-q' : 'quiet',                 '--quiet'                : 'quiet',
           '-c' : 'use_header_copyright',  '--use-header-copyright' : 'use_header_copyright'}

_values = {'-I' : ('headerfile', str),     '--headerfile'     : ('headerfile', str),
           '-i' : ('header_prefix', str),  '--header-prefix'  : ('header_prefix', str),
           '-s' : ('man_section', int),    '--section'        : ('man_section', int),
           '-S' : ('start_year', int),     '--start-year'     : ('start_year', int),
           '-d' : ('xml_dir', str),        '--xml-dir'        : ('xml_dir', str),
           '-D' : ('manpage_date', str),   '--manpage-date'   : ('manpage_date', str),
           '-Y' : ('manpage_year', int),   '--manpage-year'   : ('manpage_year', int),
           '-p' : ('package_name', str),   '--package-name'   : ('package_name', str),
           '-H' : ('header', str),         '--header-name'    : ('header', str),
           '-o' : ('output_dir', str),     '--output-dir'     : ('output_dir', str),
           '-O' : ('header_src_dir', str), '--header-src-dir' : ('header_src_dir', str),
           '-C' : ('company', str),        '--company'        : ('company', str)}


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    options, xml_files = parse_options(argv)

    today = datetime.date.today()
    date = options.manpage_date or \
           "%d-%d-%d" % (today.year, today.month, today.day)
    year = options.manpage_year or today.year

    status = 0
    for name in xml_files:
        if not process_file(options, name, date, year):
            status = 1
    return status


def _usage(errmsg=''):
    if len(errmsg) < 1:
        err = 0
    else:
        err = 1
        sys.stderr.write("Error: " + errmsg + "\n\n")
    sys.stderr.write(__doc__)
    sys.exit(err)

def _progress(options, what, name):
    if not options.quiet:
        sys.stderr.write("  %-5s %s\n" % (what, name))


def parse_options(argv):
    options = Options()
    files = []

    idx = 0
    while idx < len(argv):
        arg = argv[idx]
        idx += 1

        if arg == '--':
            files.extend(argv[idx:])
            break
        if not arg.startswith('-') or arg == '-':
            files.append(arg)
            continue
        if arg in ('-h', '--help'):
            _usage()

        opt, sep, value = arg.partition('=')
        if opt not in _flags and opt not in _values and \
           not arg.startswith('--') and arg[:2] in _values:
            # -s3 style
            opt, sep, value = arg[:2], '=', arg[2:]

        if opt in _flags:
            if sep:
                _usage("option '%s' takes no value" % opt)
            setattr(options, _flags[opt], True)
        elif opt in _values:
            if not sep:
                if idx >= len(argv):
                    _usage("option '%s' needs a value" % opt)
                value = argv[idx]
                idx += 1
            key, convert = _values[opt]
            try:
                setattr(options, key, convert(value))
            except ValueError:
                _usage("invalid value '%s' for option '%s'" % (value, opt))
        else:
            _usage("invalid option '%s'" % arg)

    if len(files) < 1:
        _usage("no XML files given")

    return options, files


def read_header_copyright(path):
    """Return the ' * Copyright' line of a header, less the comment lead."""
    if not os.path.isfile(path):
        return ''
    with open(path, 'r', encoding='utf-8', errors='replace') as header:
        for line in header:
            if line.startswith(' * Copyright'):
                return line[3:].rstrip('\r\n')
    return ''

def copyright_notice(options, headerfile, year):
    if options.use_header_copyright:
        path = os.path.join(options.header_src_dir, headerfile)
        return read_header_copyright(path)
    return "Copyright (C) %d-%d %s, All rights reserved" % \
        (options.start_year, year, options.company)

def page_config(options, headerfile, date, copyright):
    return PageConfig(headerfile, date, copyright,
                      print_params=options.print_params,
                      print_general=options.print_general,
                      man_section=options.man_section,
                      package_name=options.package_name,
                      header=options.header,
                      header_prefix=options.header_prefix)


def process_file(options, name, date, year):
    """Convert one XML file, returns False if it could not be read."""
    path = os.path.join(options.xml_dir, name)
    _progress(options, 'DOXML', path)

    try:
        with open_events(path) as reader:
            headerfile, functions, structures = \
                parse_doxml(reader, options.headerfile)
    except (ReadError, OSError) as e:
        sys.stderr.write("Error reading XML for %s: %s\n" % (path, e))
        return False

    structures = resolve_structures(structures, options.xml_dir)

    if options.print_ascii:
        for function in functions:
            sys.stdout.write(format_ascii_page(function, structures))

    if options.print_man:
        copyright = copyright_notice(options, headerfile, year)
        config = page_config(options, headerfile, date, copyright)
        write_man_pages(options, functions, structures, config)

    return True

def write_man_pages(options, functions, structures, config):
    for function in functions:
        page = format_man_page(function, functions, structures, config)
        if page is None:
            continue

        path = os.path.join(options.output_dir,
                            "%s.%s" % (function.name, config.man_section))
        try:
            with open(path, 'w', encoding='utf-8') as out:
                out.write(page)
        except OSError as e:
            sys.stderr.write("Cannot create man file %s: %s\n" % (path, e))
            continue
        _progress(options, 'MAN', path)
