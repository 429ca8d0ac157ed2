"""FLN Bot decision engine — flowchart, operations and trial harness.

Provides:
- bot_common: Priority filters, random selection and die rolls
- turn_state: Per-turn scratch state shared by the operations
- harness: Speculative trials (try an operation, keep or discard)
- fln_terror, fln_attack, fln_rally, fln_march: FLN operations
- march_paths: March path-finder
- fln_special: Subvert and Extort special activities
- fln_bot: The FLN flowchart and act()
"""
