import sys

from visualizer_to_midi.cli import main

sys.exit(main())
