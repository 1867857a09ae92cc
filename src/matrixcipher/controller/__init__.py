"""
The CONTROLLER layer drives the cipher: single steps, scheduling and the
playback state machine.
"""
