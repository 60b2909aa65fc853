# Use secrets module if available (Python version >= 3.6) per PEP 506
from secrets import SystemRandom

random = SystemRandom()
