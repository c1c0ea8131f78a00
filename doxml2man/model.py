"""
   Document model
   ==============

   The entities the builder fills in while reading a doxygen compound file
   and the formatter turns into man pages.

   :license: BSD.
"""

# Structure kinds. UNKNOWN marks a structure seen only as a reference
# from a parameter type; it is replaced or dropped when resolving.
UNKNOWN = 'unknown'
ENUM    = 'enum'
STRUCT  = 'struct'

DEFAULT_HEADERFILE = 'unknown.h'


class Param(object):
    """Function parameter, also used for structure and enum members."""

    def __init__(self, name='', type='', args='', desc='', brief='',
                 refid=None):
        self.name = name
        self.type = type
        self.args = args
        self.desc = desc
        self.brief = brief
        self.refid = refid

    def __repr__(self):
        return "Param(%r, %r)" % (self.type, self.name)


class ReturnValue(object):
    def __init__(self, name='', desc=''):
        self.name = name
        self.desc = desc

    def __repr__(self):
        return "ReturnValue(%r)" % self.name


class Structure(object):
    def __init__(self, kind=UNKNOWN, name='', brief='', desc='',
                 members=None):
        self.kind = kind
        self.name = name
        self.brief = brief
        self.desc = desc
        self.members = members if members is not None else []

    def __repr__(self):
        return "Structure(%s %r)" % (self.kind, self.name)


class Define(object):
    def __init__(self, name='', init='', brief='', desc=''):
        self.name = name
        self.init = init
        self.brief = brief
        self.desc = desc

    def __repr__(self):
        return "Define(%r)" % self.name


class Function(object):
    """
    One man page: either a documented function or, with `general` set,
    the page synthesized for the whole header file.
    """

    def __init__(self, general=False):
        self.general = general
        self.type = ''
        self.name = ''
        self.definition = ''
        self.argsstring = ''
        self.brief = ''
        self.detail = ''
        self.returnval = ''
        self.note = ''
        self.params = []
        self.defines = []
        self.retvals = []
        self.refids = []

    def __repr__(self):
        return "Function(%r)" % self.name
