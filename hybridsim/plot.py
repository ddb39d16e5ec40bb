"""Module that provides plotting tools, to streamline the creation of plots from a MotorSimulation results dictionary.
Note you will have to run matplotlib.pyplot.show() or hybridsim.plot.show() to see the plots.
"""

import matplotlib.pyplot as plt
import numpy as np

def show():
    plt.show()

def plot_pressures(data_dict):
    """Plot the tank, chamber and nozzle exit pressures against time.

    Args:
        data_dict (dict): Dictionary containing the simulation results.
    """
    fig, axs = plt.subplots()

    axs.plot(data_dict["time"], np.array(data_dict["p_tank"])/1e5, label = "Tank")
    axs.plot(data_dict["time"], np.array(data_dict["p_stag"])/1e5, label = "Chamber (stagnation)")
    axs.plot(data_dict["time"], np.array(data_dict["p_cc"])/1e5, label = "Chamber (static)", linestyle = "--")
    axs.plot(data_dict["time"], np.array(data_dict["p_exit"])/1e5, label = "Nozzle exit")

    axs.grid()
    axs.set_xlabel("Time (s)")
    axs.set_ylabel("Pressure (bar)")
    axs.legend()

def plot_thrust(data_dict):
    """Plot the thrust against time, with the total impulse in the title.

    Args:
        data_dict (dict): Dictionary containing the simulation results.
    """
    fig, axs = plt.subplots()

    axs.plot(data_dict["time"], data_dict["thrust"])

    if "summary" in data_dict:
        axs.set_title(f"Total impulse = {data_dict['summary']['total_impulse']:.1f} Ns, Isp = {data_dict['summary']['isp']:.1f} s")

    axs.grid()
    axs.set_xlabel("Time (s)")
    axs.set_ylabel("Thrust (N)")

def plot_tank(data_dict):
    """Plot the oxidizer tank temperature, vapour mass fraction and oxidizer mass against time.

    Args:
        data_dict (dict): Dictionary containing the simulation results.
    """
    fig, axs = plt.subplots(3, 1, sharex = True)

    axs[0].plot(data_dict["time"], data_dict["T_tank"])
    axs[0].set_ylabel("Temperature (K)")

    axs[1].plot(data_dict["time"], data_dict["x_tank"])
    axs[1].set_ylabel("Vapour mass fraction")

    axs[2].plot(data_dict["time"], data_dict["m_ox"])
    axs[2].set_ylabel("Oxidizer mass (kg)")
    axs[2].set_xlabel("Time (s)")

    for ax in axs:
        ax.grid()

def plot_mass_flows(data_dict):
    """Plot the oxidizer, fuel and total mass flow rates against time, with the O/F ratio on a second axis.

    Args:
        data_dict (dict): Dictionary containing the simulation results.
    """
    fig, axs = plt.subplots()

    axs.plot(data_dict["time"], data_dict["mdot_ox"], label = "Oxidizer")
    axs.plot(data_dict["time"], data_dict["mdot_fuel"], label = "Fuel")
    axs.plot(data_dict["time"], data_dict["mdot_total"], label = "Total")

    axs.grid()
    axs.set_xlabel("Time (s)")
    axs.set_ylabel("Mass flow rate (kg/s)")
    axs.legend(loc = "upper left")

    ax2 = axs.twinx()
    ax2.plot(data_dict["time"], data_dict["OF"], color = "black", linestyle = ":", label = "O/F ratio")
    ax2.set_ylabel("O/F ratio")
    ax2.legend(loc = "upper right")
