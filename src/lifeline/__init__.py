"""
Technical Lifeline

A content-driven decision-tree navigator for coding and Git problems.

PACKAGE LAYERS:
---------------
    text          - LocalizedText variant and resolution
    model         - Content Model (question and result nodes)
    validation    - load-time content checks
    serialization - authored data in and out of the model
    engine        - Navigation Engine (state machine and views)
    storage       - persistence collaborator
    clipboard     - copy/export collaborator

The content model never changes at runtime.
Only NavigationState moves.
"""

__version__ = "0.1.0"
