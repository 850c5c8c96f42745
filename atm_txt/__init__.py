"""Compiler for ATM text songs and level meters for the ATM player."""

from atm_txt.assembler import Song, compile_file, compile_song
from atm_txt.errors import AtmError, AtmLiteralError, AtmLoadError, AtmRangeError, AtmSyntaxError
from atm_txt.meter import DitheredFollower, SimpleFollower

__version__ = "0.1.0"
