"""
Development runner.

Starts the editor straight from a source checkout, without installing the
package: `src/` is put on `sys.path` before `planeframe` is imported.

Usage:
    $ python run.py
    $ PLANEFRAME_DEBUG=1 python run.py
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from planeframe.main import main  # noqa: E402

if __name__ == "__main__":
    main()
