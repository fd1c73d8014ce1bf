"""
Reference data routes (vehicles, drivers, locations, routes, schedules)
"""
