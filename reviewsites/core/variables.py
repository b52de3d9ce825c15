"""reviewsites core variable module"""


class RSVar():
    """Intialization of core variables"""

    # reviewsites version
    rs_version = "1.2.0"

    # Configuration files, later files override earlier ones
    rs_config_files = ['/etc/reviewsites/reviewsites.conf',
                       '~/.reviewsites.conf']

    # Per-site layout inside the registry directory
    rs_branch_file = 'branch'
    rs_created_file = 'created'
    rs_snapshot_file = 'snapshot.json'
    rs_dump_file = 'dump.sql'
    rs_source_dir = 'src'
    rs_files_dir = 'files'
    rs_public_dir = 'public'
    rs_private_dir = 'private'

    # Database defaults
    rs_db_charset = 'utf8mb4'
    rs_db_collation = 'utf8mb4_general_ci'
    # MySQL identifier length limit
    rs_db_name_max = 64

    # Settings block markers
    rs_settings_begin = '// BEGIN reviewsites generated configuration'
    rs_settings_end = '// END reviewsites generated configuration'
