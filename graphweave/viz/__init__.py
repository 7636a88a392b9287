from graphweave.viz.graph_plots import plot_snapshot

__all__ = ["plot_snapshot"]
