from .token import Token
