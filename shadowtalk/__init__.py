"""ShadowTalk: sentence segmentation and spoken-attempt scoring for shadowing practice.

WHY: Shadowing practice needs two things from a video's caption track:
sentence-sized units with accurate start/end times (so playback can pause
at each sentence), and a forgiving score for how closely the learner's
recognised speech matched the sentence. Raw caption fragments are neither
sentence-shaped nor directly comparable to speech-recognition output.

HOW: Two independent pipelines share a token normaliser. The segmenter
turns caption fragments into sentences, the scorer aligns a reference
sentence with a spoken transcript via a fuzzy longest-common-subsequence
search. Adapters parse caption payloads, formatters serialise results, and
the CLI and HTTP API are thin shells over the core.

RULES:
- The core (shadowtalk.core) is pure: no I/O, no shared mutable state
- Caption parsing lives in adapters, never in the segmenter
- Structured output is validated against the JSON schemas in schemas/
"""

__version__ = "0.1.0"
