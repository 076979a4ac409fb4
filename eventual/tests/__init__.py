"""
Test suite for the promise engine.

Focus areas:
- Exactly-once settlement and the always-async guarantee
- Chaining, pass-through and adoption
- all / race / promised combinators
- Virtual timers, self-check scenario and CLI
"""
