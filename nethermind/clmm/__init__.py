from .main import ClmmPool
from .math import ClmmMath
from .store import AccountStore
from .tokens import Token
