"""Transcode negotiation and command synthesis for a personal media server.

Clients advertise a capability profile; the negotiator decides per stream
whether a media element can be played directly or must be converted, and
the synthesizer turns those decisions into transcoder command variants
ordered for hardware-to-software fallback.
"""

__version__ = "0.1.0"
