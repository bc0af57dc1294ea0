from .timetables import Timetable
from .cells import TimetableCell
