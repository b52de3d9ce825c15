"""reviewsites log module"""
import sys


class Log:
    """
        Logs messages with colors for different messages
        according to functions
    """
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    ENDC = '\033[0m'

    def info(self, msg, end='\n', log=True):
        """
        Logs info messages into log file and stdout
        """
        print(Log.OKBLUE + msg + Log.ENDC, end=end)
        if log:
            self.app.log.info(msg)

    def valide(self, msg, end='\n', log=True):
        """
        Logs a successful step into log file and stdout
        """
        print(Log.OKGREEN + msg + Log.ENDC, end=end)
        if log:
            self.app.log.info(msg)

    def warn(self, msg):
        """
        Logs warning into log file and the diagnostic stream
        """
        print(Log.WARNING + msg + Log.ENDC, file=sys.stderr)
        self.app.log.warning(msg)

    def debug(self, msg):
        """
        Logs debug messages into log file
        """
        self.app.log.debug(msg, __name__)
        if self.app.debug:
            print(Log.HEADER + msg + Log.ENDC, file=sys.stderr)
