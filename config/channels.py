"""
Default table of monitored aviation channels.
"""

from models.channel import MonitoredChannel

DEFAULT_CHANNELS = (
    MonitoredChannel(name="Mentour Pilot", channel_id="UCwpHKudUkP5tNgmMdexB3ow"),
    MonitoredChannel(name="LewDix Aviation", channel_id="UCPiPmwDammRsj7ZIzKyc74A"),
    MonitoredChannel(name="The Flying Reporter", channel_id="UCwqdeuoXeCiI3CNPRFnnBFQ"),
    MonitoredChannel(name="Mentour Now!", channel_id="UCTbcSRduRJJTMaQhUVqywRw"),
    MonitoredChannel(name="Stefan Drury", channel_id="UCG1HLA8IEqZ09_C_7u5tUjQ"),
    MonitoredChannel(name="Airforceproud95", channel_id="UCfoK9LI9vmQQ36zqsFZtNJQ"),
    MonitoredChannel(name="74 Gear", channel_id="UCovVc-qqwYp8oqwO3Sdzx7w"),
    MonitoredChannel(name="Stig Aviation", channel_id="UCm64eitQ4ZRTJ-6LPH5RnFg"),
    MonitoredChannel(name="Rebuild Rescue", channel_id="UCPygLEFniGZmehxouDK-vbw"),
    MonitoredChannel(name="lucaas", channel_id="UCfb2YpWR9FWTJMjzvAlP0_Q"),
    MonitoredChannel(name="REAL ATC", channel_id="UC-cpMHfDwhDkoQ7oTK8Y_6w"),
)
