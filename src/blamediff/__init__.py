"""blamediff — annotate unified diffs with the commit that last touched each line."""

__version__ = "0.1.0"
