from .enums import *
from .errors import *
from .lexer import *
from .numeral import *
from .cenum import *
from .field import *
from .format import *
from .register import *
from .options import *
