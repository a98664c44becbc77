import json
import logging
import os

import yaml

"""
Configuration file reading.  The configuration file is either JSON
or YAML, with one section per addressbook server, i.e.

    default:
      carddav_url: https://dav.example.com/addressbooks/bob/contacts/
      carddav_user: bob
      carddav_pass: hunter2
    work:
      inherits: default
      carddav_url: https://dav.example.com/addressbooks/bob/work/
"""

log = logging.getLogger("carddav")


def config_section(config, section="default"):
    """
    Returns the section, merged with the sections it inherits from
    """
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def connection_params(section):
    """
    Picks the keys prefixed with carddav_ from a configuration section
    and turns them into DAVClient parameters.
    """
    conn_params = {}
    for k in section:
        if k.startswith("carddav_") and section[k]:
            key = k[8:]
            if key == "pass":
                key = "password"
            if key == "user":
                key = "username"
            conn_params[key] = section[k]
    return conn_params


def read_config(fn):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '')}/.config"
        for config_file in (
            f"{cfgdir}/carddav/addressbook.conf",
            f"{cfgdir}/carddav/addressbook.yaml",
            f"{cfgdir}/carddav/addressbook.json",
            "/etc/carddav/addressbook.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            try:
                with open(fn, "rb") as config_file:
                    return yaml.load(config_file, yaml.SafeLoader)
            except yaml.YAMLError:
                log.error(
                    f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                )
    except FileNotFoundError:
        log.info("no config file found")
    except ValueError:
        log.error("error in config file.  It will be ignored", exc_info=True)
    return {}
