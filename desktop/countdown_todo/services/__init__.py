"""Services Layer — command bridge, tracker store, and countdown ticker.

Invariants:
    - Every backend call goes through CommandBridge.invoke_envelope
    - Only TrackerStore mutates TrackerState
"""
