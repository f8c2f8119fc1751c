'''choose the best audio stream for an item

A DIDL-Lite item may have several ``<res>`` elements: the same track
transcoded to different formats. We want the best one that we can
actually play, where "play" means at most 192 kHz, at most 32 bits
(ALSA can play 32-bit at 24-bit), and at most stereo.
'''

import logging
from typing import Optional, Sequence

from .models import Resource

log = logging.getLogger(__name__)

MAX_SAMPLE_FREQUENCY = 192000
MAX_BITS_PER_SAMPLE = 32
MAX_AUDIO_CHANNELS = 2

#: returned by `select_best()` when no candidate is playable
NO_STREAM = -1


def is_eligible(res: Resource) -> bool:
    '''Return true if res satisfies the hard format constraints.

    A missing frequency, bit depth or channel count does not disqualify a
    resource: plenty of servers just don't bother to fill them in. One
    that is present but not a number does.
    '''
    if res.bad_format:
        return False
    return ((res.sample_frequency is None or
             res.sample_frequency <= MAX_SAMPLE_FREQUENCY) and
            (res.bits_per_sample is None or
             res.bits_per_sample <= MAX_BITS_PER_SAMPLE) and
            (res.nr_audio_channels is None or
             res.nr_audio_channels <= MAX_AUDIO_CHANNELS))


def _rank(value: Optional[int]) -> int:
    return 0 if value is None else value


def is_better(this: Resource, best: Resource) -> bool:
    '''Return true if this should replace best as the running choice.'''
    # A resource with no bit depth never displaces one that has it, but
    # it can still beat another bit-depth-less resource on frequency or
    # channels.
    if this.bits_per_sample is None and best.bits_per_sample is not None:
        return False

    this_freq, best_freq = _rank(this.sample_frequency), _rank(best.sample_frequency)
    if this_freq != best_freq:
        return this_freq > best_freq

    this_chans, best_chans = _rank(this.nr_audio_channels), _rank(best.nr_audio_channels)
    if this_chans != best_chans:
        return this_chans > best_chans

    if this.bits_per_sample is None:
        return False
    if best.bits_per_sample is None:
        return True
    return this.bits_per_sample > best.bits_per_sample


def select_best(candidates: Sequence[Resource]) -> int:
    '''Return the index of the best playable resource in candidates,
    or `NO_STREAM` if none of them is playable.

    Candidates are scanned in order; the first eligible one becomes the
    running best, and later ones replace it only if strictly better
    (see `is_better()`). So for equally good candidates, the earliest
    wins.
    '''
    best_idx = NO_STREAM
    for idx, res in enumerate(candidates):
        log.debug('candidate %d: %s', idx, res.describe_format())
        if not is_eligible(res):
            continue
        if best_idx == NO_STREAM or is_better(res, candidates[best_idx]):
            best_idx = idx
    log.debug('chose candidate %d of %d', best_idx, len(candidates))
    return best_idx
