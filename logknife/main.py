import asyncio
import logging
import signal
import sys

from .errors import ConfigurationError, FatalReadError, OpenError

log = logging.getLogger()


def setup_logging(is_debug):
    """
    Configure logging based on --debug in sys.argv
    :param is_debug:
    """
    root = logging.getLogger()
    [root.removeHandler(h) for h in root.handlers[:]]
    [root.removeFilter(f) for f in root.filters[:]]
    logging.basicConfig(
        format='[%(threadName)s][%(levelname)s] %(module)s:%(funcName)s:%('
               'lineno)s %(message)s',
        level=logging.DEBUG if is_debug else logging.INFO,
        stream=sys.stderr,
    )


def exception_handler(loop, ctx):
    """
    context is a dict object containing the following keys (new keys may be
            introduced in future Python versions):
    'message': Error message;
    'exception' (optional): Exception object;
    'future'    (optional): asyncio.Future instance;
    'task'      (optional): asyncio.Task instance;
    """
    log.error('Unhandled exception: ' + ctx['message'],
              exc_info=ctx.get('exception'))


async def async_main(runtime, terminal=None):
    """
    async main creates a global context for execution
    """
    from .cli import Terminal
    from .engine import FollowService

    loop = asyncio.get_running_loop()
    loop.set_exception_handler(exception_handler)

    term = terminal or Terminal()
    if runtime.color_mode == 'auto':
        runtime.use_color = term.isatty()
    else:
        runtime.use_color = runtime.color_mode == 'always'

    service = FollowService(runtime)
    try:
        loop.add_signal_handler(signal.SIGTERM, service.close)
    except (NotImplementedError, AttributeError):
        pass  # no unix signals on this platform
    try:
        await service.run(term)
    finally:
        log.debug('close async loop')


def main(argv=None):
    setup_logging('--debug' in (sys.argv if argv is None else argv))

    from .config import argv_parse
    try:
        options, runtime = argv_parse(argv)
        setup_logging(options.debug)
        asyncio.run(async_main(runtime))
    except ConfigurationError as e:
        log.error('%s', e)
        return 2
    except (OpenError, FatalReadError) as e:
        log.error('%s', e)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
