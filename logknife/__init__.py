#!/usr/bin/env python3 -u
"""
Follow a growing log file, filter its lines and colorize the result.
"""
# NOTES
# http://www.termsys.demon.co.uk/vtansi.htm
# https://www.cs.princeton.edu/courses/archive/spr09/cos333/beautiful.html

__version__ = '0.1.0'
__application__ = 'logknife'
default_config_file = '~/.logknife'
