"""Match domain services: persistence rules and the game status controller.

Routes import these so that transport concerns (JSON bodies, status codes)
stay out of the match lifecycle and the status state machine.
"""
