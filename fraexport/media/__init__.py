# Media decoding
from .loader import MediaLoader
