import os
import sys

# modules live flat under BHC/ and import each other by bare name
BHC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'BHC'))
if BHC_DIR not in sys.path:
    sys.path.insert(0, BHC_DIR)
