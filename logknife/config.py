"""
Configuration file processing, sys.argv processing, and runtime configuration
"""

import argparse
import logging
import os
import re
from io import StringIO
from itertools import chain

from .commands import Color, Follow, Include, Exclude, Highlight, JsonKey
from .colorize import color_lookup
from .errors import ConfigurationError
from .filter import LineFilter
from .tail import tail_request
from .util import expand_path, build_repr

log = logging.getLogger()
default_config_file = '~/.logknife'
config_classes = [Follow, Include, Exclude, Highlight, JsonKey, Color]


class ConfigGroup:
    """represents current set of patterns"""

    def __init__(self, name, *args):
        self.name = name
        self.colors = dict(color_lookup)
        self.files = []
        self.includes = []
        self.excludes = []
        self.highlights = []
        self.json_keys = []
        self.add(*args)

    def color(self, token):
        name = token if isinstance(token, str) else token.long
        try:
            return self.colors[name]
        except KeyError:
            raise ConfigurationError('Unknown color %r' % name) from None

    def add(self, *args):
        """add object to session"""
        for obj in args:
            if isinstance(obj, Color):
                self.colors[obj.long] = obj
            elif isinstance(obj, Follow):
                self.files.append(obj)
            elif isinstance(obj, Exclude):
                self.excludes.append(obj.pattern)
            elif isinstance(obj, Include):
                self.includes.append(obj.pattern)
            elif isinstance(obj, Highlight):
                if isinstance(obj.color, str):
                    obj.color = self.color(obj.color)
                self.highlights.append(obj)
            elif isinstance(obj, JsonKey):
                self.json_keys.append(obj.key)
            else:
                raise ConfigurationError(
                    'Unknown obj type %r' % type(obj).__name__)

    __repr__ = build_repr('Group', 'name')


class Runtime(ConfigGroup):
    """Runtime configuration"""

    def __init__(self, *args):
        super().__init__('runtime', *args)
        self.path = None
        self.interval_ms = 200
        self.tail = 0
        self.follow = True
        self.json = False
        self.regex = False
        self.color_mode = 'auto'
        self.use_color = True

    def line_filter(self):
        """compile include/exclude patterns"""
        return LineFilter(self.includes, self.excludes, regex=self.regex)

    __repr__ = build_repr('Runtime', 'path', 'tail', 'interval_ms',
                          'includes', 'excludes')


def parse_config_file(config_file, group_names):
    """
    Reads config_file and returns the objects of the named groups
    :param config_file:
    :param group_names:
    """
    config_file = expand_path(config_file)
    if not os.path.isfile(config_file):
        if group_names:
            raise ConfigurationError('Config file %r not found' % config_file)
        return []

    log.debug('parsing config %r, %r', config_file, group_names)
    with open(config_file) as fh:
        content = fh.read()
    buf_fh = StringIO(content)
    # repr content must be a dictionary, search for { ignoring
    # any comments coming before it
    stripped = ''.join(ln.split('#', 1)[0].strip() for ln in
                       content.splitlines(True))
    try:
        if re.match(r'\A{', stripped, re.MULTILINE):
            groups = parse_repr_config(buf_fh)
        else:
            groups = parse_yaml_config(buf_fh)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            'Parse config %r: %s' % (config_file, e)) from e

    if not group_names:
        return []
    if not isinstance(groups, dict):
        raise ConfigurationError('Config %r is not a mapping of groups'
                                 % config_file)
    missing = [z for z in group_names if z not in groups]
    if missing:
        raise ConfigurationError('Unknown group(s) %s in %r'
                                 % (', '.join(missing), config_file))
    return list(chain(*[groups[z] or [] for z in group_names]))


def parse_repr_config(stream):
    """
    read config_file, returns a dict of lists containing namespace objects.
    Example -
    {
    'nginx': [
      Follow('/var/log/nginx/error.log', 20),
      Exclude('favicon'),
      Highlight('ERROR'),
      ]
    }
    """
    if hasattr(stream, 'read'):
        content = stream.read()
    else:
        log.debug('stream %r', stream)
        content = stream
    with_globals = {c.__name__: c for c in config_classes}
    with_globals['__builtins__'] = {}
    return eval(content, with_globals)


def parse_yaml_config(stream):
    """
    read config_file, returns dict of lists containing namespace objects.
    expected format -
    group-name:
      - !ctor [args...]
    Example -
    nginx:
      - !follow [/var/log/nginx/error.log, 20]
      - !exclude favicon
      - !highlight [ERROR, red]
    """
    import yaml

    class ConfigLoader(yaml.SafeLoader):
        pass

    def build_ctor(class_object):
        def ctor(loader, node):
            log.debug('ctor(loader, node=%r)', node)
            if isinstance(node, yaml.SequenceNode):
                args = loader.construct_sequence(node)
            else:
                args = [loader.construct_scalar(node)]
            try:
                return class_object(*args)
            except (TypeError, ValueError) as e:
                raise ConfigurationError('%s %r: %s' % (
                    class_object.__name__, args, e)) from e

        return ctor

    for cls in config_classes:
        ConfigLoader.add_constructor('!' + cls.__name__.lower(),
                                     build_ctor(cls))
    ConfigLoader.add_constructor('!json-key', build_ctor(JsonKey))
    ConfigLoader.add_constructor('!negative', build_ctor(Exclude))

    data = yaml.load(stream, Loader=ConfigLoader)
    log.debug('parse_config(stream) => %r', data)
    return data


def interval_type(value):
    """polling interval in milliseconds, at least 10"""
    try:
        return max(10, int(value))
    except ValueError:
        raise argparse.ArgumentTypeError('invalid interval %r' % value)


def argv_parse(argv=None):
    """
    Parse argv and the config file, returns (options, runtime)
    """
    class ConfigAction(argparse.Action):
        """Expand file path"""

        def __call__(self, p, namespace, values, option_string=None):
            setattr(namespace, self.dest, expand_path(values))

    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument(
        '--config', '-c', default=default_config_file, action=ConfigAction
    )
    config_parser.add_argument(
        '-z', metavar='Z', default=[], dest='group_names', action='append',
    )

    options, ignore = config_parser.parse_known_args(argv)
    log.debug('initial options %r', options)

    cfg_objects = parse_config_file(options.config, options.group_names)
    log.debug('config objects %r', cfg_objects)

    # add files, patterns, colors, etc from the configuration
    session = Runtime(*cfg_objects)

    # import the parent package high level description and version
    from . import __doc__ as desc
    from . import __version__ as version

    parser = argparse.ArgumentParser(prog='logknife', description=desc)
    parser.add_argument(
        '--version', action='version', version='%(prog)s ' + version
    )
    parser.add_argument(
        '--debug', default=False, dest='debug', action='store_true',
        help='enable debug',
    )
    parser.add_argument(
        '--config', '-c',
        metavar='CFG', default=default_config_file, action=ConfigAction,
        help='configuration file, default %(default)s',
    )
    parser.add_argument(
        '-z', metavar='Z', default=[], dest='group_names', action='append',
        help='load Z group(s) from CFG file'
    )
    parser.add_argument(
        'command', choices=['follow'],
        help='follow FILE',
    )
    parser.add_argument(
        'path', metavar='FILE',
        nargs='?' if session.files else None,
        help='file to follow',
    )
    parser.add_argument(
        '--include', '-i', metavar='PTRN', default=[], dest='includes',
        action='append', help='print only lines matching PTRN (repeatable)',
    )
    parser.add_argument(
        '--exclude', '-x', metavar='PTRN', default=[], dest='excludes',
        action='append', help='drop lines matching PTRN (repeatable)',
    )
    parser.add_argument(
        '--highlight', '-H', metavar='WORD', default=[], dest='highlights',
        action='append', help='highlight exact WORD (repeatable)',
    )
    parser.add_argument(
        '--json', default=False, action='store_true',
        help='colorize lines as JSON',
    )
    parser.add_argument(
        '--json-key', '-k', metavar='KEY', default=[], dest='json_keys',
        action='append', help='emphasize JSON KEY (repeatable), implies '
                              '--json',
    )
    parser.add_argument(
        '--regex', '-E', default=False, action='store_true',
        help='PTRN is a python regular expression instead of the built-in '
             '^ $ . * subset',
    )
    parser.add_argument(
        '--interval', metavar='MS', default=200, type=interval_type,
        help='polling interval in milliseconds, default %(default)s',
    )
    parser.add_argument(
        '--tail', '-n', metavar='N', default=None, dest='tail', type=int,
        help='output the last N lines before following',
    )
    parser.add_argument(
        '--since', metavar='SECONDS', default=0, type=float,
        help='approximate the last SECONDS of output as SECONDS x RATE '
             'lines, used when -n is not given',
    )
    parser.add_argument(
        '--rate', metavar='RATE', default=10, type=float,
        help='assumed lines per second for --since, default %(default)s',
    )
    parser.add_argument(
        '--no-follow', default=True, dest='follow', action='store_false',
        help='print the tail and exit',
    )
    parser.add_argument(
        '--color', default='auto', choices=['auto', 'always', 'never'],
        help='colorize output, default %(default)s',
    )
    parser.add_argument(
        '--no-color', dest='color', action='store_const', const='never',
        help='same as --color never',
    )

    options = parser.parse_args(argv)
    log.debug('final options %r', options)

    # add patterns from arguments
    session.add(*[Include(p) for p in options.includes])
    session.add(*[Exclude(p) for p in options.excludes])
    session.add(*[Highlight(w) for w in options.highlights])
    session.add(*[JsonKey(k) for k in options.json_keys])

    if options.path:
        session.path = expand_path(options.path)
        tail = options.tail
    elif len(session.files) == 1:
        session.path = session.files[0].path
        tail = session.files[0].n if options.tail is None else options.tail
    else:
        raise ConfigurationError('Only one file can be followed, got %s'
                                 % ', '.join(f.path for f in session.files))

    session.tail = tail_request(tail, options.since, options.rate)
    session.interval_ms = options.interval
    session.follow = options.follow
    session.json = options.json or bool(session.json_keys)
    session.regex = options.regex
    session.color_mode = options.color
    log.debug('runtime %r', session)
    return options, session
