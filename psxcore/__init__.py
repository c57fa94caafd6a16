"""PlayStation hardware components: cue-sheet CD images, the CD-ROM controller, controller I/O registers and Cop0."""

__version__ = "0.1.0"