import logging
import os
import platform
import sys

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('connection', 'default')
    'connection.default'
    >>> config_flavor('connection')
    'connection'
    """
    configname = name if not flavor else name + '.' + flavor
    return configname


def config_filename(name, package=None):
    """
    Determines the location of a config file relative to the source root containing this module.
    """
    filename = sys.modules[__name__].__file__
    dirname = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(filename)), '../..'))
    if package:
        dirname = os.path.join(dirname, package.replace('.', '/'))
    config_file = os.path.join(dirname, name + config_extension)
    return config_file


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    if must_exist or os.path.exists(file):
        return ConfigObj(file, interpolation='Template', file_error=must_exist)
    return ConfigObj()


def config_flavor_file(name, package=None, subpart=None, must_exist=False) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the specialization, if the specialization is given,
    otherwise just the base name.
    :param name:    The name of the base configuration
    :param subpart: The name of the specialization.
    :return: The ConfigObj for the configuration file, empty if the file does not exist.
    """
    configname = config_flavor(name, subpart)
    file = config_filename(configname, package)
    return load_config_file_base(file, must_exist)


def load_config_spec(name, package=None) -> ConfigObj:
    """ loads the schema that validates the configuration with the given name. """
    file = config_filename(config_flavor(name, 'schema'), package)
    return ConfigObj(file, list_values=False, _inspec=True, file_error=True)


def load_config(name, package=None, user_dir='~'):
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later files overriding earlier ones:
        - the default specialization
        - the platform specialization
        - the user override
        - the base configuration
        The merged configuration is then validated against the "schema" specialization,
        which also supplies defaults for missing values.
    :param name: the base name of the configuration to load.
    :return: the validated ConfigObj
    """
    local_config = config_flavor_file(name, package)
    default_config = config_flavor_file(name, package, 'default')
    platform_config = config_flavor_file(name, package, platform.system().lower())
    user_config = load_config_file_base(os.path.join(os.path.expanduser(user_dir), name + config_extension),
                                        must_exist=False)
    config = ConfigObj()
    config.merge(default_config)
    config.merge(platform_config)
    config.merge(user_config)
    config.merge(local_config)

    config.configspec = load_config_spec(name, package)
    validator = Validator()
    result = config.validate(validator)
    if result is not True:
        for section_list, key, res in flatten_errors(config, result):
            if key is not None:
                logger.error('The "%s" key in the section "%s" failed validation: %s',
                             key, ', '.join(section_list), res)
            else:
                logger.error('The following section was missing: %s', ', '.join(section_list))
        raise ConfigObjError("the config failed validation %s" % result)
    return config


def apply(target, config_path, config_name, package=None, **kwargs):
    """
    Applies defined values from a path to a given target object.
    :param target: The object to receive the values defined
    :param config_path: The path that is the prefix to the values defined. The path is split on '.'.
    :param config_name: The configuration file to load.
    :param package: the package that contains the configuration file
    :return: the target
    """
    conf = load_config(config_name, package, **kwargs)
    name_parts = config_path.split('.')
    apply_conf_path(conf, name_parts, target)
    return target


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the sections to resolve
    :return: The configuration object identified by the path
    """
    for p in path:    # lookup specific section
        conf = conf.get(p, None)
        if conf is None:
            return
    return conf


def apply_conf_path(conf: Section, name_parts, target):
    """
    Applies a configuration path to a given target object
    :param conf:        The root configuration object
    :param name_parts:  The path of the configuration to apply
    :param target:      The target object that receives the configured values
    """
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def apply_conf(conf: Section, target):
    """
    Applies the attributes contained in a configuration object to a target object.
    It does this by iterating over the items in the configuration and setting any attributes with the same name.
    """
    for k, v in conf.items():
        if hasattr(target, k):
            setattr(target, k, v)
