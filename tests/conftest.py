# tests/conftest.py
import sys
from pathlib import Path

# repo_root  = …/addmul project
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root))
