# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Pioneer receiver.
"""
from .app import proj_api, get_receiver_client, get_receiver_config, get_raw_config
