#!/usr/bin/env python3
"""
Main entry point for the on-demand Temperature Checker.
Every /temperature request reads the host sensors fresh.
"""

from core.monitor import TemperatureMonitor


def main():
    monitor = TemperatureMonitor()
    monitor.run()


if __name__ == "__main__":
    main()
