import matplotlib.pyplot as plt
import numpy as np


class Plotter:
    def plot_results(self, costs, stats, title="Cooperative Caching", window=50,
                     save_path=None, show=True):
        """Plot per-request cost with a moving average, and the hit breakdown.

        costs: per-request cost list from a simulation run
        stats: dict with local_hit_rate, global_hit_rate and miss_rate (0..1)
        """
        requests = list(range(1, len(costs) + 1))
        moving_avg = []
        for i in range(len(costs)):
            start_idx = max(0, i - window + 1)
            moving_avg.append(np.mean(costs[start_idx:i+1]))

        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

        ax1.plot(requests, costs, 'b-', alpha=0.25, label='cost per request')
        ax1.plot(requests, moving_avg, 'b-', linewidth=2, label=f'{window}-request avg')
        ax1.set_xlabel('Request')
        ax1.set_ylabel('Cost (ticks)')
        ax1.set_title(title)
        ax1.grid(True, alpha=0.3)
        ax1.legend()

        labels = ['local hit', 'global hit', 'miss']
        values = [stats.get('local_hit_rate', 0.0),
                  stats.get('global_hit_rate', 0.0),
                  stats.get('miss_rate', 0.0)]
        ax2.bar(labels, values, color=['tab:green', 'tab:blue', 'tab:red'])
        ax2.set_ylim(0, 1.0)
        ax2.set_ylabel('Fraction of requests')
        ax2.set_title('Where requests were served')
        ax2.grid(True, axis='y', alpha=0.3)

        fig.tight_layout()
        if save_path:
            fig.savefig(save_path)
        if show:
            plt.show()
        else:
            plt.close(fig)
        return fig
