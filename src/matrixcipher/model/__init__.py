"""
The MODEL layer contains the pure matrix algebra of the cipher.
It has NO knowledge of timers, playback or rendering.
"""
