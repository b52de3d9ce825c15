"""reviewsites file utils core classes."""
import os
import shutil

from reviewsites.core.logging import Log


class RSFileUtils():
    """Utilities to operate on files"""

    def create_symlink(self, paths):
        """
        Create symbolic links provided in list with first as source
        and second as destination
        """
        src, dst = paths
        if os.path.lexists(dst):
            Log.debug(self, "Destination: {0} exists".format(dst))
            return False
        os.symlink(src, dst)
        Log.debug(self, "Created symlink {0} -> {1}".format(dst, src))
        return True

    def remove_symlinks(self, directory):
        """
        Remove every symbolic link directly inside directory,
        other entries are left untouched
        """
        removed = 0
        for entry in os.scandir(directory):
            if entry.is_symlink():
                os.unlink(entry.path)
                removed += 1
        Log.debug(self, "Removed {0} symlinks from {1}"
                  .format(removed, directory))
        return removed

    def copyfiles(self, src, dest):
        """
        Copies a directory tree, dest must not exist yet
        """
        Log.debug(self, "Copying files, Source: {0}, Dest: {1}"
                  .format(src, dest))
        shutil.copytree(src, dest, symlinks=True)

    def mkdir(self, path):
        """
        create directories including parents.
        """
        os.makedirs(path, exist_ok=True)

    def isempty(self, path):
        """
        True when path is missing or an empty directory
        """
        if not os.path.exists(path):
            return True
        return os.path.isdir(path) and not os.listdir(path)

    def remove(self, path):
        """
        Remove a file, symlink or directory tree
        """
        if os.path.islink(path) or os.path.isfile(path):
            os.unlink(path)
        elif os.path.isdir(path):
            shutil.rmtree(path)
        else:
            return
        Log.debug(self, "Removed {0}".format(path))

    def read(self, path, default=None):
        """
        Read a text file, default when it does not exist
        """
        if not os.path.isfile(path):
            return default
        with open(path, encoding='utf-8') as f:
            return f.read()

    def write(self, path, content):
        """
        Write a text file, replacing any previous content
        """
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        Log.debug(self, "Wrote {0}".format(path))
