import math
from dataclasses import dataclass


class IEEE_802_11:
    def __init__(self):
        # FHSS parameters used in Bianchi's analysis of the DCF
        """
        Several notes about the FHSS profile:
        - All frame lengths are given in bits and include the MAC header where the frame has one, the PHY header is
          accounted separately and is prepended to every frame
        - With 1 Mbit/s the length in bits equals the air time in microseconds, so the data frame lasts
          8184 + 272 + 128 = 8584 us
        - The propagation delay is fixed to 1 us, it also serves as the vulnerable window between the end of the
          backoff and the moment the transmission is visible to the other stations

        Frame structure:
        |------------|------------|-----------------------------------|
        | PHY header | MAC header |              payload              |

        Reference:
        [1] G. Bianchi, "Performance Analysis of the IEEE 802.11 Distributed Coordination Function," IEEE Journal on
            Selected Areas in Communications, vol. 18, no. 3, pp. 535-547, 2000.

        """
        self.fhss = {'bit_rate': 1 * 1e6,  # 1 Mbps
                     'slot_duration': 50,  # microseconds
                     'SIFS': 28,
                     'DIFS': 128,
                     'propagation_delay': 1,
                     'payload_length': 8184,  # bit
                     'mac_header_length': 272,
                     'phy_header_length': 128,
                     'ack_length': 112,  # MAC part only, PHY header is added
                     'rts_length': 160,
                     'cts_length': 112}

        # IEEE 802.11b (long preamble, 11 Mbps data rate)
        self.b = {'bit_rate': 11 * 1e6,
                  'slot_duration': 20,
                  'SIFS': 10,
                  'DIFS': 50,
                  'propagation_delay': 1,
                  'payload_length': 1024 * 8,
                  'mac_header_length': 34 * 8,
                  'phy_header_length': 192,  # sent at 1 Mbps, converted below
                  'phy_header_rate': 1 * 1e6,
                  'ack_length': 14 * 8,
                  'rts_length': 20 * 8,
                  'cts_length': 14 * 8}

        # IEEE 802.11g (ERP-OFDM, 54 Mbps)
        self.g = {'bit_rate': 54 * 1e6,
                  'slot_duration': 9,
                  'SIFS': 10,
                  'DIFS': 28,
                  'propagation_delay': 1,
                  'payload_length': 1500 * 8,
                  'mac_header_length': 34 * 8,
                  'phy_header_length': 20 * 54,  # 20 us preamble + signal field expressed in bits at 54 Mbps
                  'ack_length': 14 * 8,
                  'rts_length': 20 * 8,
                  'cts_length': 14 * 8}


@dataclass(frozen=True)
class DcfTiming:
    """
    Timing parameters of the DCF, all values are integers (microseconds, except payload_bits)

    Attributes:
        slot: backoff slot duration
        sifs: short inter-frame spacing
        difs: distributed inter-frame spacing
        propagation_delay: time between the end of the backoff and the transmission becoming visible
        data_frame: air time of a data frame (PHY header + MAC header + payload)
        ack_frame: air time of an ACK frame
        rts_frame: air time of an RTS frame
        cts_frame: air time of a CTS frame
        payload_bits: payload delivered by one successful transmission

    References:
        [1] G. Bianchi, "Performance Analysis of the IEEE 802.11 Distributed Coordination Function," IEEE Journal on
            Selected Areas in Communications, vol. 18, no. 3, pp. 535-547, 2000.
    """

    slot: int = 50
    sifs: int = 28
    difs: int = 128
    propagation_delay: int = 1
    data_frame: int = 8584
    ack_frame: int = 240
    rts_frame: int = 288
    cts_frame: int = 240
    payload_bits: int = 8184

    def __post_init__(self):
        for name in ('slot', 'sifs', 'difs', 'propagation_delay', 'data_frame', 'ack_frame', 'rts_frame',
                     'cts_frame', 'payload_bits'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError('%s must be a non-negative integer, got %r' % (name, value))
        if self.slot == 0:
            raise ValueError('slot must be positive')

    @classmethod
    def from_profile(cls, profile):
        """
        Build the timing from one of the IEEE_802_11 profiles
        :param profile: a dictionary such as IEEE_802_11().fhss
        :return: DcfTiming, every air time is rounded up to a whole microsecond
        """

        bit_rate = profile['bit_rate']
        phy_rate = profile.get('phy_header_rate', bit_rate)
        phy_header = profile['phy_header_length'] / phy_rate * 1e6

        def air_time(length):
            return math.ceil(phy_header + length / bit_rate * 1e6 - 1e-9)

        return cls(slot=profile['slot_duration'],
                   sifs=profile['SIFS'],
                   difs=profile['DIFS'],
                   propagation_delay=profile['propagation_delay'],
                   data_frame=air_time(profile['mac_header_length'] + profile['payload_length']),
                   ack_frame=air_time(profile['ack_length']),
                   rts_frame=air_time(profile['rts_length']),
                   cts_frame=air_time(profile['cts_length']),
                   payload_bits=profile['payload_length'])

    def transmit_duration(self, use_rts_cts):
        # with RTS/CTS only the RTS frame is exposed to collisions
        return self.rts_frame if use_rts_cts else self.data_frame

    def success_deferral(self, use_rts_cts):
        delta = self.propagation_delay
        if use_rts_cts:
            return (self.sifs + delta + self.cts_frame + self.sifs + delta + self.data_frame +
                    self.sifs + delta + self.ack_frame + self.difs + delta)
        return self.sifs + delta + self.ack_frame + self.difs + delta

    def collision_deferral(self, use_rts_cts):
        return self.difs + self.propagation_delay

    def deferral(self, round_succeeded, use_rts_cts):
        """
        Idle time a station waits after the channel becomes free, before resuming the backoff countdown
        :param round_succeeded: whether the busy period that just ended carried exactly one transmission
        :param use_rts_cts: access mode
        :return: deferral in microseconds
        """

        if round_succeeded:
            return self.success_deferral(use_rts_cts)
        return self.collision_deferral(use_rts_cts)
