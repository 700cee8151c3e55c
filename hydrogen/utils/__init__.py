"""Constants, time formatting and time parsing helpers."""