"""
Settings objects for the connection and its transports. The defaults here match connection.schema.cfg;
load() overlays the values from the layered connection configuration files.
"""
from ev3connection.config.config import apply

config_name = 'connection'
config_package = __package__


class Settings:
    section = None

    @classmethod
    def load(cls, name=config_name, package=config_package, **kwargs):
        return apply(cls(), cls.section, name, package, **kwargs)

    def __repr__(self):
        names = [k for k in vars(type(self)) if not k.startswith('_') and k != 'section']
        return '%s(%s)' % (type(self).__name__, ', '.join('%s=%r' % (k, getattr(self, k)) for k in names))


class ConnectionSettings(Settings):
    section = 'connection'
    max_buffer_size = 2
    write_delay = 0.125
    poll_interval = 0.01


class SerialSettings(Settings):
    section = 'serial'
    baudrate = 115200
    read_timeout = 1.0


class RfcommSettings(Settings):
    section = 'rfcomm'
    channel = 1
    connect_timeout = 5.0
    read_timeout = 1.0
