import logging

#
# Output Helpers
#
# Console coloring is handled by coloredlogs, see klipperconf.util.logging.setup_logging.
class Logger:

    IsDebugEnabled = False
    _logger = logging.getLogger("provisioner")


    @staticmethod
    def setup(level:int = logging.INFO):
        Logger._logger.setLevel(level)


    @staticmethod
    def Finalize():
        for handler in logging.getLogger().handlers:
            try:
                handler.flush()
            except Exception:
                pass
        logging.shutdown()


    @staticmethod
    def enable_debug_logging():
        Logger.IsDebugEnabled = True
        Logger._logger.setLevel(logging.DEBUG)
        logging.getLogger().setLevel(logging.DEBUG)
        for handler in logging.getLogger().handlers:
            handler.setLevel(logging.DEBUG)


    @staticmethod
    def Debug(msg) -> None:
        Logger._logger.debug(msg)


    @staticmethod
    def Header(msg)  -> None:
        Logger._logger.info(msg)


    @staticmethod
    def Blank() -> None:
        print("")


    @staticmethod
    def Info(msg) -> None:
        Logger._logger.info(msg)


    @staticmethod
    def Warn(msg) -> None:
        Logger._logger.warning(msg)


    @staticmethod
    def Error(msg) -> None:
        Logger._logger.error(msg)
