# PAC firmware container decoding & extraction (core package used by the CLI and the GUI)
__version__ = "1.1.0"
