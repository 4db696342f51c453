import os.path
import unittest


def suite() -> unittest.TestSuite:
    here = os.path.dirname(os.path.abspath(__file__))
    return unittest.defaultTestLoader.discover(
        here, top_level_dir=os.path.dirname(os.path.dirname(here))
    )
