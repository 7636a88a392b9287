import logging


def setup_logging(debug: bool):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    # font manager chatter drowns out layout/clustering debug lines
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
